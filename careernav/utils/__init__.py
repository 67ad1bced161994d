__all__ = [
    "create_access_token",
    "get_current_user",
    "require_role",
    "oauth2_scheme",
    "setup_logging",
]


def __getattr__(name):
    if name in {
        "create_access_token",
        "get_current_user",
        "require_role",
        "oauth2_scheme",
    }:
        from . import security as _security
        return getattr(_security, name)
    if name == "setup_logging":
        from . import log_config as _log_config
        return _log_config.setup_logging
    raise AttributeError(f"module 'careernav.utils' has no attribute '{name}'")
