"""Pagestack — unbounded navigation history on a depth-capped page stack.

Host platforms that cap the number of open pages still let applications
navigate as deep as they like: pagestack keeps the full logical history,
maps it onto the physical stack, and reloads or restores pages the cap
pushed out.

Basic usage::

    from pagestack import Navigator, NavigatorConfig

    navigator = Navigator(platform, NavigatorConfig(max_physical_depth=10))
    host.on_page_unload(navigator.on_page_unload)

    await navigator.open("/pages/detail/detail?id=3")
    await navigator.back()

Concurrency guards for any async operation::

    from pagestack import merging_step

    login = merging_step(login)  # concurrent callers share one login
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ConfigurationError",
    "DISCARDED",
    "History",
    "MutexMode",
    "MutexNamespace",
    "NavResult",
    "NavigationContext",
    "NavigationError",
    "Navigator",
    "NavigatorConfig",
    "PagestackError",
    "Platform",
    "RestoreContext",
    "Route",
    "make_mutex",
    "make_no_concurrent",
    "merging_step",
    "no_concurrent",
    "single_aisle",
    "support_callbacks",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "ConfigurationError": "pagestack.errors",
    "DISCARDED": "pagestack.navigator",
    "History": "pagestack.history",
    "MutexMode": "pagestack.mutex",
    "MutexNamespace": "pagestack.mutex",
    "NavResult": "pagestack.platform",
    "NavigationContext": "pagestack.context",
    "NavigationError": "pagestack.errors",
    "Navigator": "pagestack.navigator",
    "NavigatorConfig": "pagestack.config",
    "PagestackError": "pagestack.errors",
    "Platform": "pagestack.platform",
    "RestoreContext": "pagestack.resolver",
    "Route": "pagestack.history",
    "make_mutex": "pagestack.mutex",
    "make_no_concurrent": "pagestack.mutex",
    "merging_step": "pagestack.mutex",
    "no_concurrent": "pagestack.mutex",
    "single_aisle": "pagestack.mutex",
    "support_callbacks": "pagestack.compat",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pagestack`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
