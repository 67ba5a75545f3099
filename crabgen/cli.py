"""crabgen command line interface.

Usage::

    python -m crabgen.cli create ./my-app --framework poem
    python -m crabgen.cli resource Post --project ./my-app
    python -m crabgen.cli plugin auth --project ./my-app
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from crabgen.config import BackendDatabase, BackendFramework, BackendOrm, Config
from crabgen.generator import ProjectGenerator
from crabgen.scaffolder.errors import MaterializeError, ScaffoldError
from crabgen.scaffolder.materializer import MaterializeResult
from crabgen.utils import console, print_error, print_success, print_summary_table, print_warning


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crabgen",
        description="crabgen -- scaffold and grow full-stack Rust web projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  crabgen create ./my-app\n"
            "  crabgen resource Post --project ./my-app\n"
            "  crabgen plugin auth --project ./my-app\n"
        ),
    )

    options = argparse.ArgumentParser(add_help=False)
    options.add_argument(
        "--framework",
        choices=[f.value for f in BackendFramework],
        default=None,
        help="Backend framework (default: saved project setting or actix-web)",
    )
    options.add_argument(
        "--database",
        choices=[d.value for d in BackendDatabase],
        default=None,
        help="Database backend (default: saved project setting or postgres)",
    )
    options.add_argument(
        "--orm",
        choices=[o.value for o in BackendOrm],
        default=None,
        help="ORM (default: saved project setting or diesel)",
    )
    options.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unknown $PLACEHOLDER tokens in templates",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", parents=[options], help="Create a new project")
    create.add_argument("target", help="Directory of the new project")

    resource = sub.add_parser("resource", parents=[options], help="Add a model and service")
    resource.add_argument("name", nargs="+", help="Resource name (first word is used)")
    resource.add_argument("--project", "-p", default=".", help="Project directory (default: .)")

    plugin = sub.add_parser("plugin", parents=[options], help="Install a plugin")
    plugin.add_argument("name", help="Plugin name, e.g. auth")
    plugin.add_argument("--project", "-p", default=".", help="Project directory (default: .)")

    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Merge environment, saved project settings and command line options."""
    project_dir = Path(args.target if args.command == "create" else args.project)
    env = Config.from_env()
    overrides = {
        "backend_framework": BackendFramework(args.framework) if args.framework else None,
        "backend_database": BackendDatabase(args.database) if args.database else None,
        "backend_orm": BackendOrm(args.orm) if args.orm else None,
        "strict_placeholders": args.strict,
    }
    if args.command == "create":
        base = env.model_copy(update={"project_dir": project_dir})
        return base.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    return Config.for_project(project_dir, **overrides)


def run(args: argparse.Namespace, generator: ProjectGenerator | None = None) -> MaterializeResult:
    generator = generator or ProjectGenerator(load_config(args))
    if args.command == "create":
        return generator.create_project()
    if args.command == "resource":
        return generator.create_resource(" ".join(args.name))
    return generator.install_plugin(args.name)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``crabgen`` / ``python -m crabgen.cli``."""
    args = build_parser().parse_args(argv)

    try:
        result = run(args)
    except MaterializeError as exc:
        print_error(f"Error: {exc}")
        print_warning(
            "Files written before the failure were kept; fix the file above and re-run."
        )
        return 1
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1
    except ValueError as exc:
        print_error(f"Error: {exc}")
        return 1

    print_summary_table(
        {
            "Files written": str(len(result.written)),
            "Files patched": str(len(result.patched)),
            "Modules registered": str(len(result.registered)),
            "Migrations": ", ".join(m.name for m in result.migrations) or "-",
        },
        title=f"crabgen {args.command}",
    )
    print_success("Done.")
    console.print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
