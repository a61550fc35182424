"""Issuer card templates, read from <card_templates_dir>/<issuer>/<card>/card.yaml."""
import logging
from pathlib import Path
from typing import Iterator

import yaml

from cardvalue.config import settings
from cardvalue.schemas.template import CardTemplateOut

logger = logging.getLogger(__name__)

_templates: dict[str, CardTemplateOut] = {}
_last_fingerprint: str = ""


def _visible_dirs(parent: Path) -> list[Path]:
    return [p for p in sorted(parent.iterdir()) if p.is_dir() and not p.name.startswith(".")]


def _card_files() -> Iterator[tuple[str, Path]]:
    """Yield (template id, card.yaml path) pairs in issuer/card order."""
    root = Path(settings.card_templates_dir)
    if not root.is_dir():
        return
    for issuer_dir in _visible_dirs(root):
        for card_dir in _visible_dirs(issuer_dir):
            card_file = card_dir / "card.yaml"
            if card_file.is_file():
                yield f"{issuer_dir.name}/{card_dir.name}", card_file


def _compute_fingerprint() -> str:
    """Number of card files and their latest mtime; changes whenever a card is added or edited."""
    mtimes = []
    for _, card_file in _card_files():
        try:
            mtimes.append(card_file.stat().st_mtime)
        except OSError:
            continue
    return f"{len(mtimes)}:{max(mtimes, default=0.0)}"


def _read_template(template_id: str, card_file: Path) -> CardTemplateOut | None:
    try:
        data = yaml.safe_load(card_file.read_text())
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Skipping template %s: failed to parse YAML: %s", template_id, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Skipping template %s: expected a mapping at the top level", template_id)
        return None

    # Empty YAML keys fall back to the schema defaults
    data = {key: value for key, value in data.items() if value is not None}
    issuer, card_name = template_id.split("/", 1)
    data.setdefault("name", card_name)
    data.setdefault("issuer", issuer)
    try:
        return CardTemplateOut.model_validate({**data, "id": template_id})
    except ValueError as exc:
        logger.warning("Skipping template %s: validation error: %s", template_id, exc)
        return None


def load_templates() -> None:
    """Read every card template, replacing the loaded set in one assignment."""
    global _templates, _last_fingerprint

    if not Path(settings.card_templates_dir).is_dir():
        logger.warning("Card templates directory %s does not exist", settings.card_templates_dir)

    loaded = {}
    for template_id, card_file in _card_files():
        template = _read_template(template_id, card_file)
        if template is not None:
            loaded[template_id] = template

    _templates = loaded
    _last_fingerprint = _compute_fingerprint()
    logger.info("Loaded %d card templates from %s", len(loaded), settings.card_templates_dir)


def reload_if_changed() -> bool:
    """Reload when a card file was added, removed or touched. Returns True if reloaded."""
    if _compute_fingerprint() == _last_fingerprint:
        return False
    logger.info("Card templates changed, reloading")
    load_templates()
    return True


def get_all_templates() -> list[CardTemplateOut]:
    return list(_templates.values())


def get_template(template_id: str) -> CardTemplateOut | None:
    return _templates.get(template_id)


def get_templates_by_issuer(issuer: str) -> list[CardTemplateOut]:
    return [t for t in _templates.values() if t.issuer.lower() == issuer.lower()]
