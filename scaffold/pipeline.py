"""Scaffold run orchestrator and command-line entry point.

A run goes through these stages:

1. FETCH     -- turn the template location into a local directory.
2. LOAD      -- read ``.scaffold.toml`` and compile the exclude patterns.
3. RESOLVE   -- prompt for (or take from flags) every declared parameter,
                then the project name.
4. GENERATE  -- prepare the target directory and render the tree.
5. NOTES     -- render and print the post-generation notes.

Usage::

    python -m scaffold scaffold ./my-template --name Widget
    python -m scaffold scaffold git@github.com:org/template.git -d ./out -f
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field
from rich.markup import escape

from scaffold.config import ScaffoldConfig
from scaffold.descriptor import load_descriptor
from scaffold.errors import ScaffoldError
from scaffold.fetcher import TemplateFetcher
from scaffold.resolver import ParameterResolver, Prompter, RichPrompter
from scaffold.scaffolder import Materializer, MaterializeResult, TemplateRenderer, compile_excludes
from scaffold.utils import console, print_error, print_notes, print_success, print_summary_table

# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class ScaffoldOptions(BaseModel):
    """Everything the command line can ask of a run."""

    template: str = Field(..., description="Template location (local path or git URL)")
    project_name: Optional[str] = Field(default=None)
    target_dir: Optional[Path] = Field(default=None)
    force: bool = Field(default=False)
    append: bool = Field(default=False)
    passphrase_needed: bool = Field(default=False)
    parameters: dict[str, Any] = Field(default_factory=dict)
    verbose: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Scaffolder:
    """Runs one materialization from options to a generated project.

    Attributes:
        options: What to generate and where.
        config: Engine configuration.
        prompter: Interactive front-end used for missing values.
        fetcher: Resolves the template location.
    """

    def __init__(
        self,
        options: ScaffoldOptions,
        config: ScaffoldConfig | None = None,
        prompter: Prompter | None = None,
        fetcher: TemplateFetcher | None = None,
    ) -> None:
        self.options = options
        self.config = config or ScaffoldConfig()
        self.prompter = prompter or RichPrompter()
        self.fetcher = fetcher or TemplateFetcher(self.config.fetch)

    def run(self) -> MaterializeResult:
        """Execute every stage; any :class:`ScaffoldError` aborts the run."""
        opts = self.options

        template_root = self.fetcher.fetch(opts.template, opts.passphrase_needed)
        descriptor = load_descriptor(template_root, self.config.descriptor_filename)
        matcher = compile_excludes(
            descriptor.exclude,
            descriptor_filename=self.config.descriptor_filename,
            vcs_dirs=self.config.vcs_dirs,
        )

        builder = ParameterResolver(self.prompter).resolve(
            descriptor.parameter_items(),
            preset_name=opts.project_name,
            preset_values=opts.parameters,
        )

        materializer = Materializer(
            template_root,
            descriptor,
            renderer=TemplateRenderer(self.config.render),
            matcher=matcher,
            config=self.config,
            verbose=opts.verbose,
        )
        result = materializer.materialize(
            builder,
            base_dir=opts.target_dir,
            force=opts.force,
            append=opts.append,
        )

        print_success(
            f"Your project {escape(result.parameters.name)} has been generated successfully"
        )
        if opts.verbose:
            print_summary_table(
                {
                    "Target": result.target_dir,
                    "Directories": len(result.directories),
                    "Files": len(result.files),
                },
                title="Generated",
            )
        if result.notes:
            print_notes(result.notes)
        return result


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key.strip(), value


def build_parser() -> argparse.ArgumentParser:
    """Build the ``scaffold`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="scaffold",
        description="Generate projects from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subcommands = parser.add_subparsers(dest="command", required=True)
    sub = subcommands.add_parser(
        "scaffold",
        help="Scaffold a new project from a template",
        description="Scaffold a new project from a template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  scaffold scaffold ./template -n Widget\n"
            "  scaffold scaffold https://host/org/template.git -d ./out -f\n"
            "  scaffold scaffold ./template -a -P lang=rust -P port=8080\n"
        ),
    )
    sub.add_argument("template", help="Specify your template location")
    sub.add_argument(
        "--name", "-n",
        default=None,
        help="Specify the name of your generated project (and so skip the prompt asking for it)",
    )
    sub.add_argument(
        "--force", "-f",
        action="store_true",
        help="Override target directory if it exists",
    )
    sub.add_argument(
        "--append", "-a",
        action="store_true",
        help="Append files in the existing directory, do not create directory with the project name",
    )
    sub.add_argument(
        "--target-directory", "-d",
        default=None,
        help="Specify the target directory",
    )
    sub.add_argument(
        "--passphrase", "-p",
        action="store_true",
        help="Specify if your SSH key is protected by a passphrase",
    )
    sub.add_argument(
        "--param", "-P",
        action="append",
        type=_parse_param,
        default=[],
        metavar="KEY=VALUE",
        help="Give a template parameter up front instead of being prompted (repeatable)",
    )
    sub.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="List every generated entry",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m scaffold``."""
    args = build_parser().parse_args(argv)

    options = ScaffoldOptions(
        template=args.template,
        project_name=args.name,
        target_dir=Path(args.target_directory) if args.target_directory else None,
        force=args.force,
        append=args.append,
        passphrase_needed=args.passphrase,
        parameters=dict(args.param),
        verbose=args.verbose,
    )

    try:
        Scaffolder(options, config=ScaffoldConfig.from_env()).run()
    except ScaffoldError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print()
        print_error("Interrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
