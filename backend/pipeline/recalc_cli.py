#!/usr/bin/env python3
"""
Script CLI pour executer le recalcul activite / nutrition hors HTTP
Utile en cron sur le serveur, pour un rattrapage ou du debogage (--dry-run)
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from teamfuel.domain.services.batch_writer import BatchWriteError
from teamfuel.domain.services.recalc_service import RecalcOptions, RecalcService
from teamfuel.domain.services.run_lock import RecalcAlreadyRunning

# Configuration du logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recalcule niveaux d'activite et cibles nutritionnelles jusqu'a hier"
    )
    parser.add_argument(
        "--backfill-days", type=int, default=None,
        help="Nombre de jours recalcules se terminant hier (defaut: RECALC_DEFAULT_BACKFILL_DAYS)",
    )
    parser.add_argument(
        "--goal", choices=["maintain", "cut", "bulk"], default="maintain",
        help="Objectif nutritionnel applique a tous les athletes",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Calcule tout sans ecrire en base",
    )
    return parser


def main(argv: Optional[List[str]] = None, service: Optional[RecalcService] = None) -> int:
    args = build_parser().parse_args(argv)
    payload = {"default_goal": args.goal, "dry_run": args.dry_run}
    if args.backfill_days is not None:
        payload["backfill_days"] = args.backfill_days
    options = RecalcOptions.from_payload(payload)

    service = service or RecalcService()
    try:
        summary = service.run(options)
    except RecalcAlreadyRunning as e:
        logger.warning(str(e))
        return 2
    except BatchWriteError as e:
        logger.error(str(e), exc_info=True)
        print(json.dumps({"ok": False, "error": str(e), **e.to_dict()}, indent=2))
        return 1
    except Exception as e:
        logger.error(f"Recalcul en echec: {type(e).__name__}: {e}", exc_info=True)
        print(json.dumps({"ok": False, "error": str(e)}, indent=2))
        return 1

    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
