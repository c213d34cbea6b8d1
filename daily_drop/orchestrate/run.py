"""Daily run: resolve the season, try providers in order, fall back to the
local generator, normalize, and persist one JSON document per date.

Safe to invoke several times a day; an existing document is never rewritten.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import jsonschema
from pydantic import ValidationError

from daily_drop.generate.local import build_local_recipe
from daily_drop.models.recipe_schema import APP_NAME, RecipeDocument
from daily_drop.prompts import load_system_prompt
from daily_drop.providers.chat import build_providers
from daily_drop.providers.errors import InvalidShape, MissingCredential, ProviderError
from daily_drop.seasons import Hemisphere, Season, parse_hemisphere, resolve_season
from daily_drop.settings import RECIPE_DOCUMENT_SCHEMA, Settings, settings as default_settings

logger = logging.getLogger(__name__)

LOCAL_SOURCE = "local"

# os.umask can only be read by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)


@dataclass
class RunResult:
    path: Path
    source: Optional[str]
    written: bool


def today_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).date().isoformat()


def output_path(out_dir, date_iso: str) -> Path:
    return Path(out_dir) / f"{date_iso}.json"


def normalize(doc: dict, date_iso: str, season: Season, hemisphere: Hemisphere) -> dict:
    """Force the identity fields to the run's own values, whatever the source said."""
    out = dict(doc)
    out["app"] = APP_NAME
    out["date"] = date_iso
    out["season"] = season.value
    out["hemisphere"] = hemisphere.value
    return out


def _check_against_schema(doc: dict, source: str) -> None:
    if not RECIPE_DOCUMENT_SCHEMA:
        return
    try:
        jsonschema.validate(instance=doc, schema=RECIPE_DOCUMENT_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.warning("%s document does not align with RECIPE_DOCUMENT_SCHEMA: %s", source, e.message)


def validate_document(doc: dict, source: str) -> dict:
    """Return the JSON-ready document, or raise InvalidShape."""
    _check_against_schema(doc, source)
    try:
        recipe = RecipeDocument.model_validate(doc)
    except ValidationError as e:
        raise InvalidShape(source, f"document failed validation: {e.error_count()} error(s): {e}") from e
    return recipe.model_dump(mode="json")


def try_providers(
    providers: Sequence,
    date_iso: str,
    season: Season,
    hemisphere: Hemisphere,
    system_prompt: str,
) -> Tuple[Optional[dict], Optional[str]]:
    """First provider to return a valid document wins; later ones are not called."""
    for prov in providers:
        try:
            raw = prov.generate(date_iso, season, hemisphere, system_prompt)
            doc = validate_document(normalize(raw, date_iso, season, hemisphere), prov.name)
        except MissingCredential as e:
            logger.info("%s skipped: %s", e.provider, e.reason)
            continue
        except ProviderError as e:
            logger.warning("%s failed: %s", e.provider, e.reason)
            continue
        except Exception:
            logger.exception("%s failed unexpectedly", prov.name)
            continue
        logger.info("Generated via %s", prov.name)
        return doc, prov.name
    return None, None


def write_document(path: Path, doc: dict) -> bool:
    """Publish doc at path only if nothing is there yet.

    The JSON is written to a temp file in the same directory and hard-linked into
    place, so readers never see a partial file and a concurrent winner is kept.
    Returns False when another writer got there first.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            # mkstemp creates 0600; published documents get the usual umask-derived mode
            os.fchmod(fh.fileno(), 0o666 & ~_UMASK)
            json.dump(doc, fh, ensure_ascii=False, indent=2)
            fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        try:
            os.link(tmp, path)
        except FileExistsError:
            logger.warning("Document appeared while generating; keeping existing %s", path)
            return False
        return True
    finally:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass


def run_daily_drop(
    date_iso: Optional[str] = None,
    hemisphere=None,
    providers: Optional[Sequence] = None,
    out_dir=None,
    system_prompt: Optional[str] = None,
    rng=None,
    config: Optional[Settings] = None,
) -> RunResult:
    """Produce today's document (or the given date's) unless it already exists.

    Provider failures are logged and never raised; OSError from persistence is.
    """
    config = config or default_settings
    date_iso = dt.date.fromisoformat(date_iso).isoformat() if date_iso else today_iso()
    hemi = parse_hemisphere(hemisphere if hemisphere is not None else config.HEMISPHERE)
    path = output_path(out_dir or config.OUT_DIR, date_iso)

    if path.exists():
        logger.info("Already exists: %s", path)
        return RunResult(path=path, source=None, written=False)

    season = resolve_season(date_iso, hemi)
    logger.info("Run start | date=%s hemisphere=%s season=%s", date_iso, hemi.value, season.value)

    if providers is None:
        providers = build_providers(config)

    doc, source = None, None
    if providers:
        if system_prompt is None and any(getattr(p, "configured", True) for p in providers):
            try:
                system_prompt = load_system_prompt(config.PROMPT_PATH)
            except OSError as e:
                logger.warning("System prompt unavailable (%s); skipping all providers", e)
                providers = []
        if providers:
            doc, source = try_providers(providers, date_iso, season, hemi, system_prompt or "")

    if doc is None:
        logger.info("Using local generator fallback.")
        raw = build_local_recipe(date_iso, season, hemi, rng=rng)
        doc = validate_document(normalize(raw, date_iso, season, hemi), LOCAL_SOURCE)
        source = LOCAL_SOURCE

    written = write_document(path, doc)
    if written:
        logger.info("Wrote %s | source=%s title=%s", path, source, doc.get("title"))
    return RunResult(path=path, source=source if written else None, written=written)
