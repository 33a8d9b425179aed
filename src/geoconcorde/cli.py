"""Interface en ligne de commande GeoConcorde."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from geoconcorde import __version__
from geoconcorde.config import Config, GeoConcordeError
from geoconcorde.features import FeatureCollection
from geoconcorde.io_tables import list_sheets, load_collections, save_xlsx
from geoconcorde.logger import setup_logging
from geoconcorde.matching.disambiguation import TopMatchDisambiguatingMatchFinder
from geoconcorde.matching.finders import AttributeMatchFinder, MatchFinder
from geoconcorde.monitor import LoggingTaskMonitor
from geoconcorde.report import build_report_df, print_report_console
from geoconcorde.transfer import build_mapping_csv, build_mapping_df, transfer_columns

logger = logging.getLogger(__name__)


def _warn_missing_columns(config: Config, target_fc: FeatureCollection, candidate_fc: FeatureCollection) -> None:
    """Avertit si des colonnes citées par la configuration sont absentes."""
    missing: list[str] = []
    for rule in config.rules:
        if rule.target_col not in target_fc.feature_schema:
            missing.append(f"target.{rule.target_col}")
        if rule.candidate_col not in candidate_fc.feature_schema:
            missing.append(f"candidate.{rule.candidate_col}")
    for col in config.transfer_columns:
        if col not in candidate_fc.feature_schema:
            missing.append(f"transfer.{col}")
    if missing:
        print(f"Avertissement: colonnes absentes (règles ignorées): {', '.join(missing)}")


def build_match_finder(config: Config) -> MatchFinder:
    """Matcher attributaire, enveloppé par la désambiguïsation si activée."""
    finder: MatchFinder = AttributeMatchFinder.from_config(config)
    if config.disambiguate:
        finder = TopMatchDisambiguatingMatchFinder(finder)
    return finder


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    print(f"Feuilles dans {filepath}:")
    for s in list_sheets(filepath):
        print(f"  - {s}")
    return 0


def cmd_run(
    config_path: str,
    output_path: str | None,
    *,
    dry_run: bool = False,
    mapping_path: str | None = None,
) -> int:
    """Exécute le pipeline GeoConcorde."""
    config = Config.load(config_path)
    df_target, _, target_fc, candidate_fc = load_collections(config)
    _warn_missing_columns(config, target_fc, candidate_fc)

    monitor = LoggingTaskMonitor()
    result = build_match_finder(config).match(target_fc, candidate_fc, monitor)

    # --mapping prime s'il est fourni
    map_path = (
        Path(mapping_path)
        if mapping_path
        else (Path(output_path).parent / "mapping.csv" if output_path else Path(config_path).parent / "mapping.csv")
    )
    build_mapping_csv(target_fc, result, str(map_path))
    print(f"Mapping écrit: {map_path}")

    print_report_console(target_fc, result)

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.", file=sys.stderr)
        return 1

    df_enriched = transfer_columns(
        df_target,
        target_fc,
        result,
        config.transfer_columns,
        overwrite_mode=config.overwrite_mode,
        suffix_on_collision=config.suffix_on_collision,
    )
    sheets = {
        "Target": df_enriched,
        "MAPPING": build_mapping_df(target_fc, result),
        "REPORT": build_report_df(target_fc, result, config),
    }
    save_xlsx(output_path, sheets)
    print(f"Fichier de sortie: {output_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="geoconcorde",
        description="Appariement un-à-un d'entités entre deux tableurs (meilleurs matches mutuels)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ERROR")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un xlsx")
    p_list.add_argument("file", help="Fichier xlsx ou csv")

    p_run = subparsers.add_parser("run", help="Exécuter l'appariement")
    p_run.add_argument("--config", "-c", required=True, help="Fichier config JSON")
    p_run.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")
    p_run.add_argument("--mapping", "-m", help="Chemin pour mapping.csv")

    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level)
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)

        if args.command == "run":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            return cmd_run(
                args.config,
                args.output,
                dry_run=args.dry_run,
                mapping_path=args.mapping,
            )
    except GeoConcordeError as e:
        logger.debug("Échec de la commande %s", args.command, exc_info=True)
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
