"""Tests for the item renderers and print-all."""

import io
from pathlib import Path
from types import SimpleNamespace

import pytest
from git.exc import GitCommandNotFound

from buildid_cli.errors import ChangelogParseError, DocumentNotFoundError
from buildid_cli.models import BuildInfo
from buildid_cli.output import ITEM_RENDERERS, Item, emit_item, print_all
from buildid_cli.output.formatters import render_c_header, render_c_header_u_boot

from conftest import COMMIT_EPOCH


def build_info(repo, environ=None, **kwargs):
    return BuildInfo.from_directory(repo.working_tree_dir, environ=environ or {}, **kwargs)


def render(item, info):
    out = io.StringIO()
    status = emit_item(item, info, out)
    return out.getvalue(), status


def test_every_item_but_print_all_has_a_renderer():
    assert set(ITEM_RENDERERS) == set(Item) - {Item.PRINT_ALL}


def test_item_names_sorted():
    assert Item.names() == [
        "build-info",
        "build-info-brief",
        "c-header",
        "c-header-u-boot-1-2-timestamp",
        "commit-id",
        "commit-id-abbrev",
        "date-epoch",
        "date-safe-str",
        "date-str",
        "print-all",
        "project-desc",
        "repo-url",
        "version-str",
    ]


class TestPlainItems:
    def test_commit_ids(self, repo):
        info = build_info(repo)
        hexsha = repo.head.commit.hexsha

        assert render(Item.COMMIT_ID, info) == (hexsha + "\n", 0)
        assert render(Item.COMMIT_ID_ABBREV, info) == (hexsha[:12] + "\n", 0)

    def test_dates(self, repo):
        info = build_info(repo)

        assert render(Item.DATE_EPOCH, info)[0] == f"{COMMIT_EPOCH}\n"
        assert render(Item.DATE_STR, info)[0] == "2024-01-15 10:20:30 +0000\n"
        assert render(Item.DATE_SAFE_STR, info)[0] == "20240115-102030\n"

    def test_documents_and_remote(self, repo):
        info = build_info(repo)

        assert render(Item.VERSION_STR, info)[0] == "1.2.3\n"
        assert render(Item.PROJECT_DESC, info)[0] == "My Project\n"
        assert render(Item.REPO_URL, info)[0] == "https://example.com/org/my-project.git\n"

    def test_version_override_skips_changelog(self, make_repo):
        repo = make_repo(files={"README.md": "# X\n"})
        info = build_info(repo, environ={"SOURCE_X_VERSION_STR": "9.9-custom"})

        assert render(Item.VERSION_STR, info)[0] == "9.9-custom\n"

    def test_fields_are_memoized(self, repo):
        info = build_info(repo)
        first = info.get_commit()

        repo.index.commit("Another commit")

        assert info.get_commit() is first
        assert render(Item.COMMIT_ID, info)[0] == first.commit_full + "\n"

    def test_repo_url_does_not_need_history(self, make_repo):
        repo = make_repo(files={}, commit=False)
        repo.create_remote("origin", "git@example.com:org/empty.git")
        info = build_info(repo)

        assert render(Item.REPO_URL, info)[0] == "git@example.com:org/empty.git\n"
        assert info.commit is None


class TestBuildInfoBlock:
    def test_full_block(self, repo):
        info = build_info(repo, environ={"BUILD_NUMBER": "42"})
        hexsha = repo.head.commit.hexsha

        text, status = render(Item.BUILD_INFO, info)

        assert status == 0
        assert text.splitlines() == [
            'MY_PROJECT_PROJECT_NAME="my-project"',
            'MY_PROJECT_VERSION_STR="1.2.3"',
            f'MY_PROJECT_COMMIT_ID="{hexsha}"',
            f'MY_PROJECT_COMMIT_ID_ABBREV="{hexsha[:12]}"',
            f'MY_PROJECT_DATE_EPOCH={COMMIT_EPOCH}',
            'MY_PROJECT_DATE_STR="2024-01-15 10:20:30 +0000"',
            'MY_PROJECT_DATE_SAFE_STR="20240115-102030"',
            'MY_PROJECT_BUILD_NUMBER="42"',
            'MY_PROJECT_REPO_URL="https://example.com/org/my-project.git"',
            'MY_PROJECT_COMMITTER_NAME="Jane Roe"',
            'MY_PROJECT_COMMIT_SUBJECT="Add build scripts"',
        ]

    def test_brief_block_omits_remote_and_committer(self, make_repo):
        # No remote configured: the brief block must still render
        repo = make_repo()
        info = build_info(repo, project_name="fw.core")

        text, _ = render(Item.BUILD_INFO_BRIEF, info)

        assert text.startswith('FW_CORE_PROJECT_NAME="fw.core"\n')
        assert 'FW_CORE_BUILD_NUMBER="0"' in text
        assert "REPO_URL" not in text
        assert "COMMITTER_NAME" not in text
        assert "COMMIT_SUBJECT" not in text

    def test_values_are_quote_sanitized(self, make_repo):
        repo = make_repo(subject='Say "hi"')
        repo.create_remote("origin", "https://example.com/x.git")
        info = build_info(repo, environ={"SOURCE_X_VERSION_STR": '1.0 "beta"'})

        text, _ = render(Item.BUILD_INFO, info)

        assert 'MY_PROJECT_VERSION_STR="1.0 \'beta\'"' in text
        assert 'MY_PROJECT_COMMIT_SUBJECT="Say \'hi\'"' in text


class TestCHeaders:
    def test_c_header(self, repo):
        info = build_info(repo)
        abbrev = repo.head.commit.hexsha[:12]

        text = render_c_header(info)

        assert text.startswith("/* Generated file, do not edit */\n/* Generated with build-id c-header */\n\n")
        assert f"#define _BUILD_DATE_NUM_\t\t{COMMIT_EPOCH}\n" in text
        assert '#define _BUILD_DATE_STR_\t\t"2024-01-15 10:20:30 +0000"\n' in text
        assert '#define _BUILD_DATE_SAFE_STR_\t\t"20240115-102030"\n' in text
        assert '#define _BUILD_DATE_C_DATE_STR_\t\t"Jan 15 2024"\n' in text
        assert f'#define _BUILD_COMMIT_ID_\t\t"{abbrev}"\n' in text
        assert '#define _BUILD_VERSION_STR_\t\t"1.2.3"\n' in text

    def test_c_header_without_changelog(self, make_repo):
        repo = make_repo(files={"main.c": "int main(void) { return 0; }\n"})
        info = build_info(repo)

        text = render_c_header(info)

        assert "_BUILD_COMMIT_ID_" in text
        assert "_BUILD_VERSION_STR_" not in text

    def test_c_header_with_broken_changelog(self, make_repo):
        repo = make_repo(files={"CHANGELOG.md": "nothing to see\n"})
        info = build_info(repo)

        with pytest.raises(ChangelogParseError):
            render_c_header(info)

    def test_c_header_escapes_version(self, make_repo):
        repo = make_repo(files={"a.txt": "a\n"})
        info = build_info(repo, environ={"SOURCE_X_VERSION_STR": 'v1 "x" \\ y'})

        assert '#define _BUILD_VERSION_STR_\t\t"v1 \\"x\\" \\\\ y"\n' in render_c_header(info)

    def test_u_boot_header_ignores_changelog(self, make_repo):
        repo = make_repo(files={"CHANGELOG.md": "nothing to see\n"})
        info = build_info(repo)

        text = render_c_header_u_boot(info)

        assert text == (
            "/* Generated file, do not edit */\n"
            "/* Generated with build-id c-header-u-boot-1-2-timestamp */\n"
            "\n"
            '#define U_BOOT_DATE\t\t\t"Jan 15 2024"\n'
            '#define U_BOOT_TIME\t\t\t"10:20:30"\n'
        )
        assert info.version_str is None


class TestPrintAll:
    def test_all_items_succeed(self, repo):
        info = build_info(repo)
        out = io.StringIO()

        status = print_all(info, out)

        lines = out.getvalue().splitlines()
        banners = [line for line in lines if line.startswith("######## ")]
        statuses = [line for line in lines if line.startswith("[") and line.endswith("]")]
        expected = [name for name in Item.names() if name != "print-all"]

        assert status == 0
        assert banners == [f"######## {name} ################################" for name in expected]
        assert statuses == ["[0]"] * len(expected)

    def test_failures_do_not_stop_the_run(self, make_repo):
        # No changelog, no readme, no remote
        repo = make_repo(files={"main.c": "\n"})
        info = build_info(repo)
        out = io.StringIO()

        status = print_all(info, out)

        lines = out.getvalue().splitlines()
        banner_count = sum(1 for line in lines if line.startswith("######## "))
        status_by_item = {}
        current = None
        for line in lines:
            if line.startswith("######## "):
                current = line.split()[1]
            elif line.startswith("[") and line.endswith("]") and current:
                status_by_item[current] = int(line[1:-1])

        assert banner_count == len(Item) - 1
        assert status == 1
        assert status_by_item["commit-id"] == 0
        assert status_by_item["c-header"] == 0
        assert status_by_item["version-str"] == 1
        assert status_by_item["repo-url"] == 1
        assert status_by_item["project-desc"] == 1
        assert status_by_item["build-info"] == 1

    def test_missing_git_binary_does_not_stop_the_run(self, repo):
        def no_git(*args, **kwargs):
            raise GitCommandNotFound("git", "No such file or directory")

        info = build_info(repo)
        info.repo = SimpleNamespace(git=SimpleNamespace(log=no_git, config=no_git, remote=no_git))
        out = io.StringIO()

        status = print_all(info, out)

        lines = out.getvalue().splitlines()
        assert status == 1
        assert sum(1 for line in lines if line.startswith("######## ")) == len(Item) - 1
        assert "1.2.3" in lines

    def test_emit_print_all_returns_status(self, make_repo):
        repo = make_repo(files={"main.c": "\n"})
        out = io.StringIO()

        assert emit_item(Item.PRINT_ALL, build_info(repo), out) == 1


def test_missing_readme_raises(make_repo):
    repo = make_repo(files={"main.c": "\n"})

    with pytest.raises(DocumentNotFoundError):
        render(Item.PROJECT_DESC, build_info(repo))


def test_readme_override(repo, tmp_path):
    readme = Path(tmp_path) / "Other.md"
    readme.write_text("Other Project\n==========\n", encoding="utf-8")

    info = build_info(repo, readme=readme)

    assert render(Item.PROJECT_DESC, info)[0] == "Other Project\n"


class TestNamedChangelog:
    def test_missing_changelog_option_is_an_error(self, repo, tmp_path):
        info = build_info(repo, changelog=tmp_path / "NEWS.md")

        with pytest.raises(DocumentNotFoundError, match="NEWS.md"):
            render_c_header(info)

    def test_missing_configured_changelog_is_an_error(self, make_repo):
        repo = make_repo(files={".build-id.conf": "CHANGELOG_FILE=doc/TYPO.md\n"})
        info = build_info(repo)

        with pytest.raises(DocumentNotFoundError, match="TYPO.md"):
            render_c_header(info)

    def test_print_all_reports_missing_configured_changelog(self, make_repo):
        repo = make_repo(files={".build-id.conf": "CHANGELOG_FILE=doc/TYPO.md\n"})
        out = io.StringIO()

        status = print_all(build_info(repo), out)

        assert status == 1
        assert "######## c-header ################################\n[1]\n" in out.getvalue()


def test_build_info_values_are_inert_when_sourced(make_repo):
    repo = make_repo(subject="Run $(rm -rf /) `id` and \\n")
    repo.create_remote("origin", "https://example.com/x.git")
    info = build_info(repo, environ={"SOURCE_X_VERSION_STR": "1.0$HOME"})

    text, _ = render(Item.BUILD_INFO, info)

    assert 'MY_PROJECT_VERSION_STR="1.0\\$HOME"' in text
    assert 'MY_PROJECT_COMMIT_SUBJECT="Run \\$(rm -rf /) \\`id\\` and \\\\n"' in text
