"""iContribute: contributor records built from git history."""

# Lazy re-exports: import only when the package itself is imported (not when
# individual modules are run via `python -m`), which prevents a harmless but
# noisy RuntimeWarning from runpy.
from importlib import import_module as _im


def __getattr__(name: str):  # noqa: N807
    _map = {
        "collect_contributors": ("collector", "collect_contributors"),
        "read_author_entries": ("history", "read_author_entries"),
        "merge_authors": ("history", "merge_authors"),
        "build_records": ("builder", "build_records"),
        "write_records": ("builder", "write_records"),
        "load_contributors": ("store", "load_contributors"),
        "find_by_username": ("store", "find_by_username"),
        "HttpIdentityResolver": ("identity", "HttpIdentityResolver"),
        "OfflineIdentityResolver": ("identity", "OfflineIdentityResolver"),
    }
    if name in _map:
        mod_name, attr = _map[name]
        mod = _im(f"icontribute.{mod_name}")
        return getattr(mod, attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "collect_contributors",
    "read_author_entries",
    "merge_authors",
    "build_records",
    "write_records",
    "load_contributors",
    "find_by_username",
    "HttpIdentityResolver",
    "OfflineIdentityResolver",
]
