"""Configuration loading for hookdocs (repos-config.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .models import Category, Product

CONFIG_FILENAMES: Tuple[str, ...] = ("repos-config.yml", "repos-config.yaml", "repos-config.json")
DEFAULT_BRANCH = "develop"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is inconsistent."""


class ProductNotFoundError(LookupError):
    """Raised when a requested product id is not configured."""

    def __init__(self, product_id: str, suggestions: Sequence[str] = ()) -> None:
        super().__init__(f"No product found with ID: {product_id}")
        self.product_id = product_id
        self.suggestions = list(suggestions)


@dataclass(frozen=True)
class Defaults:
    """Global settings merged into every product's extraction config."""

    branch: str = DEFAULT_BRANCH
    ignore_files: Tuple[str, ...] = ()
    ignore_hooks: Tuple[str, ...] = ()
    custom_fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractorConfig:
    """How the external hook-extraction tool is invoked."""

    command: str = "wp-hooks-documentor"
    args: Tuple[str, ...] = ("generate", "--skip-build")
    config_name: str = "wp-hooks-doc.json"


@dataclass
class PipelineConfig:
    """Represents the settings defined in repos-config.yml."""

    root: Path
    repos_dir: Path
    output_dir: Path
    api_dir: Path
    llms_txt: Path
    plugins_dir: Optional[Path] = None
    templates_dir: Optional[Path] = None
    docs_route: str = "/docs/hooks"
    api_route: str = "/api/hooks"
    repo_host: str = "github.com"
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    defaults: Defaults = field(default_factory=Defaults)
    categories: Dict[str, Category] = field(default_factory=dict)
    products: List[Product] = field(default_factory=list)

    def branch_for(self, product: Product) -> str:
        return product.branch or self.defaults.branch or DEFAULT_BRANCH

    def checkout_dir(self, product: Product) -> Path:
        return self.repos_dir / product.repo_name

    def select_products(self, product_id: str | None = None) -> List[Product]:
        """Return every product, or exactly the one whose id equals ``product_id``."""
        if not product_id:
            return list(self.products)
        exact = [product for product in self.products if product.id == product_id]
        if exact:
            return exact
        needle = product_id.lower()
        similar = [
            product.id
            for product in self.products
            if product_id in product.id or needle in product.repo.lower()
        ]
        raise ProductNotFoundError(product_id, similar)


def load_config(config_path: Path | None = None) -> PipelineConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path or Path.cwd())
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")
    root = config_file.parent.resolve()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    defaults_data = _as_dict(data.get("defaults"))
    defaults = Defaults(
        branch=_as_str(defaults_data.get("branch")) or DEFAULT_BRANCH,
        ignore_files=tuple(_as_str_list(_pick(defaults_data, "ignore_files", "ignoreFiles"))),
        ignore_hooks=tuple(_as_str_list(_pick(defaults_data, "ignore_hooks", "ignoreHooks"))),
        custom_fields=dict(_as_dict(_pick(defaults_data, "custom_fields", "customFields"))),
    )

    extractor_data = _as_dict(data.get("extractor"))
    extractor = ExtractorConfig()
    if extractor_data:
        args = _pick(extractor_data, "args")
        extractor = ExtractorConfig(
            command=_as_str(extractor_data.get("command")) or extractor.command,
            args=tuple(_as_str_list(args)) if args is not None else extractor.args,
            config_name=_as_str(_pick(extractor_data, "config_name", "configName"))
            or extractor.config_name,
        )

    categories = _parse_categories(_as_dict(data.get("categories")))
    products = _parse_products(data.get("products"), root)

    return PipelineConfig(
        root=root,
        repos_dir=_resolve_path(root, _pick(data, "repos_dir", "reposDir"), "repos"),
        output_dir=_resolve_path(root, _pick(data, "output_dir", "outputDir"), "docs/hooks"),
        api_dir=_resolve_path(root, _pick(data, "api_dir", "apiDir"), "static/api"),
        llms_txt=_resolve_path(root, _pick(data, "llms_txt", "llmsTxt"), "static/llms.txt"),
        plugins_dir=_optional_path(root, _pick(data, "plugins_dir", "wp_plugins_dir")),
        templates_dir=_optional_path(root, _pick(data, "templates_dir", "templatesDir")),
        docs_route=_as_route(_pick(data, "docs_route", "docsRoute"), "/docs/hooks"),
        api_route=_as_route(_pick(data, "api_route", "apiRoute"), "/api/hooks"),
        repo_host=_as_str(_pick(data, "repo_host", "repoHost")) or "github.com",
        extractor=extractor,
        defaults=defaults,
        categories=categories,
        products=products,
    )


def resolve_extraction_config(
    product: Product,
    defaults: Defaults,
    input_dir: Path,
    *,
    output_dir: str = "./output",
) -> Dict[str, Any]:
    """Build the extraction tool configuration for one product.

    Returns a fresh mapping on every call; ``defaults`` is never modified.
    """
    return {
        "input": str(input_dir),
        "outputDir": output_dir,
        "title": product.label,
        "tagline": f"Hooks documentation for {product.label}",
        "ignoreFiles": [*defaults.ignore_files, *product.ignore_files],
        "ignoreHooks": [*defaults.ignore_hooks, *product.ignore_hooks],
        "customFields": dict(defaults.custom_fields),
        "skipBuild": True,
    }


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        for name in CONFIG_FILENAMES:
            candidate = config_path / name
            if candidate.exists():
                return candidate.resolve()
        return (config_path / CONFIG_FILENAMES[0]).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _parse_categories(data: Dict[str, Any]) -> Dict[str, Category]:
    categories: Dict[str, Category] = {}
    for category_id, raw in data.items():
        entry = _as_dict(raw)
        categories[str(category_id)] = Category(
            id=str(category_id),
            label=_as_str(entry.get("label")) or str(category_id),
            position=_as_int(entry.get("position")) or 0,
            parent=_as_str(entry.get("parent")),
        )
    for category in categories.values():
        if category.parent is None:
            continue
        parent = categories.get(category.parent)
        if parent is None:
            raise ConfigError(
                f"Category '{category.id}' references unknown parent '{category.parent}'"
            )
        if parent.parent is not None:
            raise ConfigError(
                f"Category '{category.id}' is nested more than one level deep"
            )
    return categories


def _parse_products(data: Any, root: Path) -> List[Product]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ConfigError("`products` must be a list")
    products: List[Product] = []
    seen: set[str] = set()
    for index, raw in enumerate(data):
        entry = _as_dict(raw)
        product_id = _as_str(entry.get("id"))
        repo = _as_str(entry.get("repo"))
        if not product_id or not repo:
            raise ConfigError(f"Product #{index + 1} must define both `id` and `repo`")
        if product_id in seen:
            raise ConfigError(f"Duplicate product id: {product_id}")
        seen.add(product_id)
        products.append(
            Product(
                id=product_id,
                repo=repo,
                label=_as_str(entry.get("label")) or product_id,
                branch=_as_str(entry.get("branch")),
                category=_as_str(entry.get("category")),
                src_dir=_as_str(_pick(entry, "src_dir", "srcDir")),
                source_dir=_optional_path(root, _pick(entry, "source_dir", "input_dir")),
                ignore_files=tuple(_as_str_list(_pick(entry, "ignore_files", "ignoreFiles"))),
                ignore_hooks=tuple(_as_str_list(_pick(entry, "ignore_hooks", "ignoreHooks"))),
            )
        )
    return products


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _resolve_path(root: Path, value: Any, default: str) -> Path:
    return _optional_path(root, value) or (root / default)


def _optional_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else root / path


def _as_route(value: Any, default: str) -> str:
    text = _as_str(value) or default
    return "/" + text.strip("/") if text.strip("/") else ""


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ConfigError",
    "Defaults",
    "ExtractorConfig",
    "PipelineConfig",
    "ProductNotFoundError",
    "load_config",
    "resolve_extraction_config",
]
