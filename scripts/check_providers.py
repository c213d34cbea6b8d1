"""Ask every configured provider for today's document and print what came back.

Nothing is written to disk. Usage:
  python scripts/check_providers.py
"""

import sys
import json
import pathlib
from dotenv import load_dotenv

load_dotenv()

# Ensure project root is on sys.path so `daily_drop` package can be imported
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from daily_drop.orchestrate.run import today_iso
from daily_drop.prompts import load_system_prompt
from daily_drop.providers.chat import build_providers
from daily_drop.providers.errors import ProviderError
from daily_drop.seasons import parse_hemisphere, resolve_season
from daily_drop.settings import settings

date_iso = today_iso()
hemisphere = parse_hemisphere(settings.HEMISPHERE)
season = resolve_season(date_iso, hemisphere)
system_prompt = load_system_prompt(settings.PROMPT_PATH)
print(f"date={date_iso} hemisphere={hemisphere.value} season={season.value}")

failures = 0
for provider in build_providers(settings):
    print(f"\n--- {provider.name} ({provider.model}) configured={provider.configured}")
    if not provider.configured:
        continue
    try:
        doc = provider.generate(date_iso, season, hemisphere, system_prompt)
        print(json.dumps(doc, indent=2, ensure_ascii=False))
    except ProviderError as e:
        failures += 1
        print("CALL_ERROR:", e.reason)

sys.exit(1 if failures else 0)
