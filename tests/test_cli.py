"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import FakeBackend, make_keyword
from seo_intelligence.cli import main
from seo_intelligence.config import PipelineConfig
from seo_intelligence.store import ProjectStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def invoke(runner: CliRunner, pipeline, *args: str):
    """Run the CLI with an injected pipeline."""
    return runner.invoke(
        main,
        list(args),
        obj={"config": PipelineConfig(api_key="test-key"), "pipeline": pipeline},
    )


class TestResearchCommand:
    """Tests for 'seo-intel research'."""

    def test_prints_keywords(self, runner, pipeline, fake_backend: FakeBackend, keyword_payload):
        """Test that generated keywords are listed."""
        fake_backend.response = json.dumps(keyword_payload)

        result = invoke(runner, pipeline, "research", "running shoes", "--country", "Canada")

        assert result.exit_code == 0
        assert "Keywords for 'running shoes' (Canada)" in result.output
        assert fake_backend.requests[0].profile == "fast"

    def test_saves_into_project(
        self, runner, pipeline, fake_backend: FakeBackend, keyword_payload,
        project_store: ProjectStore, sample_project,
    ):
        """Test that --project merges results into the project."""
        fake_backend.response = json.dumps(keyword_payload)

        result = invoke(runner, pipeline, "research", "running shoes", "--project", sample_project.id)

        assert result.exit_code == 0
        assert "3 new keywords" in result.output
        assert project_store.get_project(sample_project.id).keyword_count == 4

    def test_failure_exits_with_error(self, runner, pipeline):
        """Test that a failed result prints an error and exits 1."""
        result = invoke(runner, pipeline, "research", "running shoes", "--country", "Atlantis")

        assert result.exit_code == 1
        assert "Unsupported country" in result.output

    def test_bracketed_keyword_is_printed_literally(
        self, runner, pipeline, fake_backend: FakeBackend, keyword_payload
    ):
        """Test that generated text containing square brackets is not read as markup."""
        keyword_payload[0]["keyword"] = "seo [/tips]"
        fake_backend.response = json.dumps(keyword_payload[:1])

        result = invoke(runner, pipeline, "research", "seo [bold]")

        assert result.exit_code == 0
        assert "seo [/tips]" in result.output
        assert "seo [bold]" in result.output

    def test_invalid_request_without_api_key(self, runner, tmp_path: Path):
        """Test that request errors are reported even with no API key."""
        result = runner.invoke(
            main,
            ["research", "running shoes", "--country", "Atlantis"],
            obj={"config": PipelineConfig(store_dir=tmp_path)},
        )

        assert result.exit_code == 1
        assert "Unsupported country" in result.output

    def test_missing_api_key(self, runner, tmp_path: Path):
        """Test that a valid request without an API key fails cleanly."""
        result = runner.invoke(
            main,
            ["research", "running shoes"],
            obj={"config": PipelineConfig(store_dir=tmp_path)},
        )

        assert result.exit_code == 1
        assert "No API key provided" in result.output


class TestAnalyzeCommands:
    """Tests for 'seo-intel analyze' and 'seo-intel quick'."""

    def test_analyze_json(self, runner, pipeline, fake_backend: FakeBackend, smart_analysis_payload):
        """Test that --json prints the analysis payload."""
        fake_backend.response = json.dumps(smart_analysis_payload)

        result = invoke(runner, pipeline, "analyze", "--text", "Running shoes copy", "--json")

        assert result.exit_code == 0
        assert json.loads(result.output) == smart_analysis_payload

    def test_analyze_file(
        self, runner, pipeline, fake_backend: FakeBackend, smart_analysis_payload, sample_docx: Path
    ):
        """Test analyzing a Word document."""
        fake_backend.response = json.dumps(smart_analysis_payload)

        result = invoke(runner, pipeline, "analyze", "--file", str(sample_docx))

        assert result.exit_code == 0
        assert "72/100" in result.output
        assert fake_backend.requests[0].attachment.content.startswith("Running Shoes Guide")

    def test_analyze_bracketed_meta(
        self, runner, pipeline, fake_backend: FakeBackend, smart_analysis_payload
    ):
        """Test that meta tags and link anchors with brackets print literally."""
        smart_analysis_payload["meta"]["title"] = "Shoes [/red] Guide"
        smart_analysis_payload["internalLinks"] = [{"anchor": "[link]", "context": "[/x]"}]
        fake_backend.response = json.dumps(smart_analysis_payload)

        result = invoke(runner, pipeline, "analyze", "--text", "Running shoes copy")

        assert result.exit_code == 0
        assert "Shoes [/red] Guide" in result.output
        assert "[link]" in result.output

    def test_analyze_requires_source(self, runner, pipeline):
        """Test that --text or --file is required."""
        result = invoke(runner, pipeline, "analyze")

        assert result.exit_code == 1
        assert "--text or --file" in result.output

    def test_quick(self, runner, pipeline, fake_backend: FakeBackend, smart_analysis_payload):
        """Test the legacy quick analysis output."""
        fake_backend.response = json.dumps(smart_analysis_payload)

        result = invoke(runner, pipeline, "quick", "--text", "one two three", "--keyword", "shoes")

        assert result.exit_code == 0
        assert "Grade 8" in result.output
        assert "Missing H1" in result.output


class TestStrategyCommand:
    """Tests for 'seo-intel strategy'."""

    def test_writes_output_file(self, runner, pipeline, fake_backend: FakeBackend, tmp_path: Path):
        """Test saving the strategy HTML to a file."""
        fake_backend.response = "<h2>Month 1</h2>"
        output = tmp_path / "plan.html"

        result = invoke(
            runner, pipeline, "strategy",
            "--domain", "runfast.example",
            "--business-type", "Retail",
            "--goals", "Sales",
            "--output", str(output),
        )

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "<h2>Month 1</h2>"


class TestProjectCommands:
    """Tests for 'seo-intel projects'."""

    def test_create_and_list(self, runner, pipeline, project_store: ProjectStore):
        """Test creating a project and listing it."""
        result = invoke(runner, pipeline, "projects", "create", "Blog", "example.com")
        assert result.exit_code == 0

        result = invoke(runner, pipeline, "projects", "list")

        assert result.exit_code == 0
        assert "Blog" in result.output
        assert "1 projects, 0 keywords" in result.output

    def test_create_requires_fields(self, runner, pipeline):
        """Test that a blank name is rejected."""
        result = invoke(runner, pipeline, "projects", "create", " ", "example.com")

        assert result.exit_code == 1
        assert "Project name and domain are required" in result.output

    def test_bracketed_project_name(self, runner, pipeline, project_store: ProjectStore):
        """Test that a project name with brackets is shown as typed."""
        result = invoke(runner, pipeline, "projects", "create", "Blog [/b]", "example.com")

        assert result.exit_code == 0
        assert "Blog [/b]" in result.output
        assert project_store.get_projects()[0].name == "Blog [/b]"

    def test_delete_unknown(self, runner, pipeline):
        """Test deleting a project that does not exist."""
        result = invoke(runner, pipeline, "projects", "delete", "nope")
        assert result.exit_code == 1

    def test_export_and_import(self, runner, pipeline, project_store: ProjectStore, sample_project, tmp_path: Path):
        """Test exporting a project and importing it into another."""
        output = tmp_path / "export.csv"
        result = invoke(runner, pipeline, "projects", "export", sample_project.id, str(output))
        assert result.exit_code == 0
        assert output.exists()

        other = project_store.create_project("Other", "other.example")
        result = invoke(runner, pipeline, "projects", "import", other.id, str(output))

        assert result.exit_code == 0
        imported = project_store.get_project(other.id)
        assert imported.keywords == [make_keyword("seo tips", volume="1k-10k", difficulty=30)]


class TestUserCommands:
    """Tests for login, logout and whoami."""

    def test_login_whoami_logout(self, runner, pipeline, project_store: ProjectStore):
        """Test the local sign-in cycle."""
        result = invoke(runner, pipeline, "login", "ana@example.com")
        assert result.exit_code == 0
        assert project_store.get_user().name == "ana"

        result = invoke(runner, pipeline, "whoami")
        assert "ana@example.com" in result.output

        invoke(runner, pipeline, "logout")
        assert project_store.get_user() is None

    def test_login_invalid_email(self, runner, pipeline):
        """Test that a malformed email is rejected."""
        result = invoke(runner, pipeline, "login", "not-an-email")

        assert result.exit_code == 1
        assert "valid email" in result.output
