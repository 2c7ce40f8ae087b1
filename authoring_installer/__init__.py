"""Authoring tool installer (state-driven, rollback on failure).

Core design goals:
- Fixed step order, stopping at the first failure
- Interactive or unattended, decided once per run
- Configuration written as .env and conf/config.json
- One master tenant and one super user, removed again if the run fails
- Centralized logging
"""

__all__ = []
