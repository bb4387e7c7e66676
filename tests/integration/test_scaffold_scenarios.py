"""End-to-end scaffold runs.

Each test drives a complete run through :class:`~scaffold.pipeline.Scaffolder`
with the real fetcher, descriptor loader, resolver, Rich prompter (fed from an
in-memory stream) and materializer.  Only the terminal is replaced.
"""

from __future__ import annotations

import io
import shutil
import subprocess
from pathlib import Path

import pytest
from rich.console import Console

from scaffold.config import FetchConfig, ScaffoldConfig
from scaffold.errors import ConflictError
from scaffold.fetcher import cache_path_for
from scaffold.pipeline import ScaffoldOptions, Scaffolder
from scaffold.resolver import RichPrompter

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def run(template: Path | str, answers: str = "", config: ScaffoldConfig | None = None, **options):
    """Scaffold *template*, typing *answers* at the prompts."""
    console = Console(file=io.StringIO(), record=True, width=120)
    prompter = RichPrompter(console=console, stream=io.StringIO(answers))
    scaffolder = Scaffolder(
        ScaffoldOptions(template=str(template), **options),
        config=config or ScaffoldConfig(),
        prompter=prompter,
    )
    return scaffolder.run(), console


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_name_in_path_and_content(self, make_template, output_dir):
        root = make_template({"{{name}}.txt": "Hello {{name}}"})
        result, console = run(root, "Widget\n", target_dir=output_dir)

        assert result.target_dir == (output_dir / "widget").resolve()
        assert (output_dir / "widget" / "Widget.txt").read_text() == "Hello Widget"
        assert "What is the name of your generated project ?" in console.export_text()

    def test_exclusion(self, make_template, output_dir, tree_snapshot):
        root = make_template(
            {"a.txt": "a", "b.tmp": "b"},
            descriptor='[template]\nexclude = ["*.tmp"]\n',
        )
        result, _ = run(root, project_name="Widget", target_dir=output_dir)
        assert tree_snapshot(result.target_dir) == {"a.txt": b"a"}

    def test_select_parameter(self, make_template, output_dir):
        descriptor = """
            [parameters.lang]
            type = "select"
            message = "Which language?"
            values = ["go", "rust"]
        """
        root = make_template({"lang.txt": "{{ lang }}"}, descriptor=descriptor)
        result, console = run(root, "2\nWidget\n", target_dir=output_dir)

        assert result.parameters["lang"] == "rust"
        assert (result.target_dir / "lang.txt").read_text() == "rust"
        transcript = console.export_text()
        assert "1) go" in transcript
        assert "2) rust" in transcript

    def test_conflict_then_force(self, make_template, output_dir, tree_snapshot):
        root = make_template({"fresh.txt": "{{ name }}"})
        existing = output_dir / "widget"
        existing.mkdir()
        (existing / "stale.txt").write_text("stale")
        before = tree_snapshot(output_dir)

        with pytest.raises(ConflictError):
            run(root, project_name="Widget", target_dir=output_dir)
        assert tree_snapshot(output_dir) == before

        run(root, project_name="Widget", target_dir=output_dir, force=True)
        assert tree_snapshot(existing) == {"fresh.txt": b"Widget"}

    def test_every_parameter_kind(self, make_template, output_dir):
        descriptor = """
            [parameters.description]
            type = "string"
            message = "Description?"
            default = "A thing"

            [parameters.port]
            type = "integer"
            message = "Port?"
            default = 8080

            [parameters.ratio]
            type = "float"
            message = "Ratio?"

            [parameters.docker]
            type = "boolean"
            message = "Docker?"
            default = false

            [parameters.extras]
            type = "multiselect"
            message = "Extras?"
            values = ["auth", "db", "cache"]
        """
        template = (
            "{{ description }}|{{ port }}|{{ ratio }}|{{ docker }}|{{ extras | join(',') }}"
        )
        root = make_template({"summary.txt": template}, descriptor=descriptor)
        answers = "\n\n0.25\ny\n3,1\nWidget\n"
        result, _ = run(root, answers, target_dir=output_dir)

        assert (result.target_dir / "summary.txt").read_text() == "A thing|8080|0.25|True|cache,auth"

    def test_append_into_existing_project(self, make_template, output_dir):
        (output_dir / "README.md").write_text("mine")
        root = make_template({"CHANGELOG.md": "# {{ name }}\n"})
        result, _ = run(root, project_name="Widget", target_dir=output_dir, append=True)

        assert result.target_dir == output_dir.resolve()
        assert (output_dir / "README.md").read_text() == "mine"
        assert (output_dir / "CHANGELOG.md").read_text() == "# Widget\n"

    def test_structural_exclusions(self, make_template, output_dir, tree_snapshot):
        root = make_template(
            {".git/HEAD": "ref: refs/heads/main\n", "docs/.scaffold.toml": "kept", "x.txt": "x"}
        )
        result, _ = run(root, project_name="Widget", target_dir=output_dir)
        assert tree_snapshot(result.target_dir) == {
            "docs": None,
            "docs/.scaffold.toml": b"kept",
            "x.txt": b"x",
        }

    def test_notes_printed(self, make_template, output_dir):
        root = make_template({}, descriptor='notes = "Run: cd {{ name | kebab_case }}"\n')
        result, _ = run(root, project_name="My Widget", target_dir=output_dir)
        assert result.notes == "Run: cd my-widget"


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitTemplate:
    def test_clone_and_generate(self, tmp_path, output_dir):
        repo = tmp_path / "template.git"
        repo.mkdir()
        (repo / ".scaffold.toml").write_text('notes = "cloned"\n')
        (repo / "{{ name }}.md").write_text("# {{ name }}\n")

        def git(*args: str) -> None:
            subprocess.run(
                ["git", "-c", "user.name=test", "-c", "user.email=test@example.com", *args],
                cwd=repo,
                check=True,
                capture_output=True,
            )

        git("init", "-q")
        git("add", ".")
        git("commit", "-q", "-m", "template")

        cache = tmp_path / "cache"
        config = ScaffoldConfig(fetch=FetchConfig(cache_dir=cache, clone_depth=0))
        result, _ = run(str(repo), config=config, project_name="Widget", target_dir=output_dir)

        assert (result.target_dir / "Widget.md").read_text() == "# Widget\n"
        assert not (result.target_dir / ".git").exists()
        assert (cache_path_for(str(repo), cache) / ".git").is_dir()
        assert result.notes == "cloned"
