"""CLI entrypoints for cl commands."""

from __future__ import annotations

import argparse
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List

from .config import PROJECT_FILE, ConfigError, ProjectConfig, load_config
from .literate.driver import UnliterateError, Unliterator
from .logging import configure_logging, get_logger, log_action
from .project.build import BuildError, Builder
from .project.cleanup import clean, prune
from .project.modules import ModuleError, ModuleManager
from .project.scaffold import init_project

EXTERNAL_PREFIX = "cl-"

_EXPECTED_ERRORS = (ConfigError, ModuleError, BuildError, UnliterateError, FileExistsError, FileNotFoundError)

logger = get_logger("cli")


def _add_global_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    verbose_default: object = argparse.SUPPRESS if suppress_default else False
    project_default: object = argparse.SUPPRESS if suppress_default else "."
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=verbose_default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-C",
        "--project",
        default=project_default,
        metavar="DIR",
        help=f"Project directory containing {PROJECT_FILE} (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cl",
        description="Clean command line tools.",
        epilog=(
            "Any other command X runs an executable named 'cl-X' from your PATH, "
            "so 'cl-foobar' can be used as 'cl foobar'."
        ),
    )
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    def add(name: str, help_text: str, func: Callable[..., int], aliases: List[str] | None = None):
        sub = subparsers.add_parser(name, aliases=aliases or [], help=help_text, description=help_text)
        _add_global_options(sub, suppress_default=True)
        sub.set_defaults(func=func)
        return sub

    help_parser = add("help", "Show the list of available commands.", _cmd_help)
    help_parser.set_defaults(parser=parser)

    init_parser = add("init", "Initialise a new project (src/, test/ and Project.toml).", _cmd_init)
    init_parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory to initialise (defaults to the --project directory).",
    )
    init_parser.add_argument("--name", default=None, help="Project name (defaults to the directory name).")

    add("info", "Show information about the current project.", _cmd_info)

    add_parser = add("add", "Create new modules.", _cmd_add, aliases=["create"])
    add_parser.add_argument("modules", nargs="+", metavar="MODULE", help="Dotted module name.")
    add_parser.add_argument(
        "--literate",
        action="store_true",
        help="Create a literate (.lcl) source instead of .dcl/.icl files.",
    )
    add_parser.add_argument("--force", action="store_true", help="Overwrite existing module files.")

    remove_parser = add("remove", "Delete modules.", _cmd_remove, aliases=["rm", "delete"])
    remove_parser.add_argument("modules", nargs="+", metavar="MODULE", help="Dotted module name.")

    move_parser = add("move", "Rename a module.", _cmd_move, aliases=["mv"])
    move_parser.add_argument("old", metavar="OLD", help="Current module name.")
    move_parser.add_argument("new", metavar="NEW", help="New module name.")

    unlit_parser = add("unlit", "Regenerate .dcl/.icl files from literate sources.", _cmd_unlit)
    unlit_parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the remaining modules after a failure.",
    )

    build_parser = add("build", "Unliterate and compile the project.", _cmd_build)
    build_parser.add_argument(
        "--cpm",
        "--old",
        dest="cpm",
        action="store_true",
        help="Build with 'cpm make' instead of invoking clm directly.",
    )

    run_parser = add("run", "Run the built executable.", _cmd_run)
    run_parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the program.")

    add("clean", "Remove compiler cache directories.", _cmd_clean)
    add("prune", "Clean, then remove the executable and *-data directories.", _cmd_prune)

    return parser


def _global_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    _add_global_options(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for cl commands; returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()

    global_args, rest = _global_parser().parse_known_args(argv)
    if rest and not rest[0].startswith("-") and rest[0] not in _command_names(parser):
        configure_logging(verbose=bool(global_args.verbose))
        return _run_external(rest[0], rest[1:], cwd=Path(global_args.project))

    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))

    try:
        return int(args.func(args))
    except _EXPECTED_ERRORS as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:  # pragma: no cover - defensive guard
        logger.error("cl %s failed: %s", args.command, exc)
        logger.error("Run with --verbose for more details.")
        logger.debug("Traceback", exc_info=True)
        return 1


def _command_names(parser: argparse.ArgumentParser) -> set[str]:
    names: set[str] = set()
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            names.update(action.choices)
    return names


def _run_external(command: str, args: list[str], *, cwd: Path) -> int:
    executable = shutil.which(EXTERNAL_PREFIX + command)
    if executable is None:
        logger.error(
            "'%s' is not a valid command, run 'cl help' to see a list of all available commands",
            command,
        )
        return 1
    logger.debug("Dispatching to %s", executable)
    return subprocess.run([executable, *args], cwd=str(cwd), check=False).returncode


def _load(args: argparse.Namespace) -> ProjectConfig:
    return load_config(Path(args.project))


# ----------------------------------------------------------------------
# Commands


def _cmd_help(args: argparse.Namespace) -> int:
    args.parser.print_help()
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    target = Path(args.path) if args.path else Path(args.project)
    result = init_project(target, name=args.name, logger=get_logger("init"))
    if result.project_file is not None:
        print(f"Project created at {_relativize(result.root)}")
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    config = _load(args)
    log_action(logger, "Showing information about current project")
    project = config.project
    summary: Dict[str, object] = {
        "name": project.name,
        "version": project.version or "-",
        "authors": ", ".join(project.authors) or "-",
        "root": config.root,
        "sourcedir": _relativize(config.source_dir),
        "modules": ", ".join(project.modules) or "-",
        "othermodules": ", ".join(project.other_modules) or "-",
        "libraries": ", ".join(project.libraries) or "-",
        "main": config.executable.main or "-",
        "output": config.executable.output,
    }
    for key, value in summary.items():
        logger.info("%-12s %s", key, value)
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    config = _load(args)
    manager = ModuleManager(config.source_dir, prefixes=config.prefixes)
    manager.add(args.modules, literate=bool(args.literate), force=bool(args.force))
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    config = _load(args)
    ModuleManager(config.source_dir, prefixes=config.prefixes).remove(args.modules)
    return 0


def _cmd_move(args: argparse.Namespace) -> int:
    config = _load(args)
    ModuleManager(config.source_dir, prefixes=config.prefixes).move(args.old, args.new)
    return 0


def _cmd_unlit(args: argparse.Namespace) -> int:
    config = _load(args)
    log_action(logger, "Unliterating modules")
    unliterator = Unliterator(config.source_dir, prefixes=config.prefixes, logger=get_logger("unlit"))
    report = unliterator.process_all(config.all_modules(), keep_going=bool(args.keep_going))
    if not report.ok:
        logger.error("Failed to unliterate: %s", ", ".join(report.failed))
        return 1
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    Builder(_load(args)).build(use_project_manager=bool(args.cpm))
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    Builder(_load(args)).run(args.args)
    return 0


def _cmd_clean(args: argparse.Namespace) -> int:
    clean(_load(args).root)
    return 0


def _cmd_prune(args: argparse.Namespace) -> int:
    prune(_load(args))
    return 0


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
