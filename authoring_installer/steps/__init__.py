from .step_10_configure_environment import ConfigureEnvironmentStep
from .step_20_install_framework import InstallFrameworkStep
from .step_30_create_tenant import CreateTenantStep
from .step_40_create_super_user import CreateSuperUserStep
from .step_50_build_frontend import BuildFrontendStep

__all__ = [
    "ConfigureEnvironmentStep",
    "InstallFrameworkStep",
    "CreateTenantStep",
    "CreateSuperUserStep",
    "BuildFrontendStep",
]
