import shutil
import logging
from typing import Dict, Iterable, TYPE_CHECKING
from plantctl.assets.merger import merge
from plantctl.assets.rules import get_asset_rules, get_bundle_path, get_merge_rule
from plantctl.assets.updater import update

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)


def run_pipeline(mode: str, config: "LaunchConfig") -> Dict[str, bool]:
    """
    Updates every asset category for one build mode, bundling in production.

    Categories are processed in order; a category's bundle is merged only
    once all of its per-file updates succeeded, and only if something changed
    or the bundle does not exist yet.

    :param mode: 'debug' or 'production'.
    :param config: The launch configuration.
    :return dict: Whether each category had files regenerated.
    :raises TransformFailure: On the first failing transform; later categories are not processed.
    """
    log.info(f"--- Updating {mode} assets ---")
    rules = get_asset_rules(config, mode)
    results: Dict[str, bool] = {}

    for category in config.asset_categories:
        updated = False
        for rule in (r for r in rules if r.category == category):
            updated = update(config, mode, rule) or updated
        results[category] = updated

        if mode != "production":
            continue
        merge_rule = get_merge_rule(config, category)
        if merge_rule is None:
            continue
        bundle_path = get_bundle_path(config, mode, merge_rule)
        if updated or not bundle_path.exists():
            merge(config, merge_rule, bundle_path)
        else:
            log.debug(f"Bundle '{bundle_path.name}' for {category} is up-to-date.")

    changed = [c for c, u in results.items() if u]
    log.info(f"--- {mode.capitalize()} assets ready ({', '.join(changed) or 'no changes'}) ---")
    return results


def clean(config: "LaunchConfig", modes: Iterable[str]) -> None:
    """
    Removes the generated output trees of the given modes.

    Failures are logged as warnings; the pipeline continues.
    """
    for mode in modes:
        output_root = config.public_dir / mode
        if not output_root.exists():
            log.debug(f"Nothing to clean at '{output_root}'.")
            continue
        log.info(f"Cleaning '{output_root}'...")
        try:
            shutil.rmtree(output_root)
        except OSError as e:
            log.warning(f"Failed to delete '{output_root}': {e}")
