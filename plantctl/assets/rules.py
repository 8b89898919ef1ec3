from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

MODES = ("debug", "production")


@dataclass(frozen=True)
class AssetRule:
    """How sources of one category and extension turn into outputs."""

    category: str
    source_ext: str
    output_ext: str
    command: str
    args: Tuple[str, ...] = ()

    @property
    def command_line(self) -> List[str]:
        return [self.command, *self.args]

    def output_name(self, source_path: Path) -> str:
        return f"{source_path.stem}.{self.output_ext}"


def get_asset_rules(config: "LaunchConfig", mode: str) -> List[AssetRule]:
    """
    Returns the per-file transform rules for a build mode.

    Debug uses pass-through / uncompressed variants of the transforms.

    :param config: The launch configuration.
    :param mode: 'debug' or 'production'.
    :return list: The rules, stylesheets first, then javascripts, then images.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown build mode '{mode}'.")
    production = mode == "production"

    rules = [
        AssetRule(
            "stylesheets", "less", "css", config.lessc_executable,
            ("--compress", "-") if production else ("-",)
        ),
        AssetRule(
            "javascripts", "js", "js",
            config.uglifyjs_executable if production else config.copy_executable,
            ("--compress", "--mangle") if production else ()
        ),
    ]
    rules.extend(
        AssetRule("images", ext, ext, config.copy_executable)
        for ext in config.image_extensions
    )
    return [rule for rule in rules if rule.category in config.asset_categories]


def get_merge_rule(config: "LaunchConfig", category: str) -> Optional[AssetRule]:
    """
    Returns the rule producing the combined bundle of a category, or None when
    the category is never bundled (images).
    """
    for rule in get_asset_rules(config, "production"):
        if rule.category == category and category != "images":
            return rule
    return None


def get_bundle_path(config: "LaunchConfig", mode: str, rule: AssetRule) -> Path:
    """The combined output file of a category."""
    return config.output_dir(mode, rule.category) / f"{config.merge_bundle_name}.{rule.output_ext}"
