"""appseed command line.

Usage::

    appseed /github.com/me/myapp
    appseed ./me/myapp --no-sessions --bootstrap none
    appseed ./me/myapp --tls-certs-only --tls-common-name dev.local
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from pydantic import ValidationError

from appseed.config import BootstrapVariant, ProjectConfig, Settings
from appseed.filesystem import FileSystemError, LocalFileSystem, TreeEntry
from appseed.scaffolder import (
    CertGenerationError,
    InvalidPathError,
    ProjectedPath,
    TemplateRenderError,
    TreeTransformer,
    generate_tls_certs,
)
from appseed.scaffolder.certs import CERT_FILENAME
from appseed.utils import (
    format_duration,
    print_created,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appseed",
        description="appseed -- generate a new web application from a template tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  appseed /github.com/me/myapp\n"
            "  appseed ./me/myapp --no-sessions --bootstrap none\n"
            "  appseed ./me/myapp --tls-certs-only\n"
        ),
    )

    parser.add_argument(
        "path",
        help="Import path of the new app, absolute (/a/b) or relative (./a/b)",
    )
    parser.add_argument(
        "--template-dir",
        type=Path,
        default=None,
        help="Template tree to generate from (default: $APPSEED_TEMPLATE_DIR or ./templates)",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Workspace root the app is created under (default: $APPSEED_WORKSPACE or ~/workspace)",
    )
    parser.add_argument("--no-readme", action="store_true", help="Skip README generation")
    parser.add_argument("--no-gitignore", action="store_true", help="Skip .gitignore generation")
    parser.add_argument("--no-config", action="store_true", help="Skip the app config file")
    parser.add_argument(
        "--no-fontawesome", action="store_true", help="Skip Font Awesome assets"
    )
    parser.add_argument(
        "--no-bootstrap-js", action="store_true", help="Skip the Bootstrap JS bundle"
    )
    parser.add_argument("--no-sessions", action="store_true", help="Skip session support")
    parser.add_argument(
        "--bootstrap",
        choices=[variant.value for variant in BootstrapVariant],
        default=BootstrapVariant.REGULAR.value,
        help="Bootstrap variant to include (default: regular)",
    )
    parser.add_argument(
        "--tls-common-name",
        default="localhost",
        help="Common name for the generated TLS certificate (default: localhost)",
    )
    parser.add_argument(
        "--tls-certs-only",
        action="store_true",
        help="Only (re)generate the TLS certificate and key",
    )
    parser.add_argument("--silent", "-s", action="store_true", help="Suppress output")
    return parser


def _report(projected: ProjectedPath, entry: TreeEntry) -> None:
    print_created(projected.clean_path)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``appseed`` / ``python -m appseed.cli``."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    workspace = args.workspace or settings.workspace_root
    template_dir = args.template_dir or settings.template_dir

    try:
        config = ProjectConfig.from_path(
            args.path,
            workspace,
            no_readme=args.no_readme,
            no_git_ignore=args.no_gitignore,
            no_config=args.no_config,
            no_font_awesome=args.no_fontawesome,
            no_bootstrap_js=args.no_bootstrap_js,
            no_sessions=args.no_sessions,
            bootstrap=args.bootstrap,
            tls_common_name=args.tls_common_name,
            tls_certs_only=args.tls_certs_only,
            silent=args.silent,
        )
    except (InvalidPathError, ValidationError) as exc:
        print_error(str(exc))
        return 1

    fs = LocalFileSystem()
    start = time.monotonic()
    generated: list[ProjectedPath] = []
    try:
        if not config.tls_certs_only:
            transformer = TreeTransformer(
                config, fs, on_entry=None if config.silent else _report
            )
            generated = transformer.run(template_dir)
        certs = generate_tls_certs(config, fs)
    except (FileSystemError, TemplateRenderError) as exc:
        print_error(str(exc))
        return 1
    except CertGenerationError as exc:
        print_error(str(exc))
        if exc.written:
            print_warning("Half-written key pair left in place: " + ", ".join(map(str, exc.written)))
        elif not config.tls_certs_only and fs.exists(config.app_path / CERT_FILENAME):
            print_warning("Rerun with --tls-certs-only to replace the existing certificate and key")
        return 1

    if not config.silent:
        print_summary_table(
            {
                "App name": config.app_name,
                "Import path": config.import_path,
                "Location": str(config.app_path),
                "Entries generated": str(len(generated)),
                "Certificate": str(certs.cert_path),
                "Private key": str(certs.key_path),
                "Elapsed": format_duration(time.monotonic() - start),
            },
            title="appseed",
        )
        print_success(f"Created {config.app_name} in {config.app_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
