from .metrics import ASSET_LOOKUPS, PATH_REWRITES, record_asset_lookup, record_path_rewrite

__all__ = ["ASSET_LOOKUPS", "PATH_REWRITES", "record_asset_lookup", "record_path_rewrite"]
