"""
Assets package for the plantctl launcher.

This package compiles, copies and bundles the application's stylesheets,
javascripts and images, and optionally watches them for changes.
"""

from .rules import AssetRule, MODES, get_asset_rules
from .updater import update
from .merger import merge
from .pipeline import clean, run_pipeline
from .watcher import AssetChangeHandler, watch_assets

__all__ = [
    'AssetRule', 'MODES', 'get_asset_rules',
    'update', 'merge', 'clean', 'run_pipeline',
    'AssetChangeHandler', 'watch_assets',
]
