from __future__ import annotations

import logging
from pathlib import Path

import allure
import pytest

from native_maven.agent import prepare_agent_dir, run_agent
from native_maven.config import AgentDirPolicy
from native_maven.descriptor import BuildDescriptor, PluginFound, PluginNotFound
from native_maven.errors import (
    CommandFailure,
    DescriptorParseError,
    DescriptorWriteError,
    SubprocessFailureError,
    SubprocessInvocationError,
)
from native_maven.invoker import InvocationResult

pytestmark = [
    allure.epic("Agent Run"),
    allure.feature("Patched POM Invocation"),
]

FLAG_PREFIX = "-agentlib:native-image-agent=config-merge-dir="


def _run(project: Path, invoker, **kwargs):
    return run_agent(
        pom_path=project / "pom.xml",
        agent_pom_path=project / "agentPom.xml",
        agent_dir=project / "src" / "main" / "resources" / "META-INF" / "native-image",
        toolchain_home=Path("/opt/graalvm"),
        invoker=invoker,
        **kwargs,
    )


def test_run_agent_invokes_javafx_run_on_patched_copy(
    tmp_path: Path,
    write_pom,
    recording_invoker,
) -> None:
    pom = write_pom(tmp_path)
    original = pom.read_text("utf-8")
    invoker = recording_invoker()

    result = _run(
        tmp_path,
        invoker,
        profiles=("dev", "native"),
        properties={"javafx.platform": "linux"},
    )

    assert len(invoker.requests) == 1
    request = invoker.requests[0]
    assert request.goals == ("javafx:run",)
    assert request.profiles == ("dev", "native")
    assert request.properties == {"javafx.platform": "linux"}
    assert request.pom_file == tmp_path / "agentPom.xml"
    assert "<executable>/opt/graalvm/bin/java</executable>" in invoker.pom_texts[0]
    assert f"<option>{FLAG_PREFIX}{result.agent_dir}</option>" in invoker.pom_texts[0]

    assert isinstance(result.lookup, PluginFound)
    assert result.exit_code == 0
    assert result.agent_dir.is_dir()
    assert not (tmp_path / "agentPom.xml").exists()
    assert pom.read_text("utf-8") == original


def test_run_agent_nonzero_exit_fails_with_execution_exception(
    tmp_path: Path,
    write_pom,
    recording_invoker,
) -> None:
    write_pom(tmp_path)
    cause = SubprocessFailureError("Maven was terminated by signal SIGKILL", exit_code=-9)
    invoker = recording_invoker(result=InvocationResult(exit_code=1, execution_exception=cause))

    with pytest.raises(CommandFailure, match="javafx:run failed") as error_info:
        _run(tmp_path, invoker)

    assert error_info.value.cause is cause
    assert error_info.value.__cause__ is cause
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_nonzero_exit_without_exception_still_fails(
    tmp_path: Path,
    write_pom,
    recording_invoker,
) -> None:
    write_pom(tmp_path)
    invoker = recording_invoker(result=InvocationResult(exit_code=2))

    with pytest.raises(CommandFailure) as error_info:
        _run(tmp_path, invoker)

    assert error_info.value.cause is None
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_wraps_invocation_error_and_cleans_up(
    tmp_path: Path,
    write_pom,
    recording_invoker,
) -> None:
    write_pom(tmp_path)
    invoker = recording_invoker(error=SubprocessInvocationError("Maven executable not found: mvn"))

    with pytest.raises(CommandFailure) as error_info:
        _run(tmp_path, invoker)

    assert isinstance(error_info.value.cause, SubprocessInvocationError)
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_cleans_up_on_unexpected_error(
    tmp_path: Path,
    write_pom,
    recording_invoker,
) -> None:
    write_pom(tmp_path)
    invoker = recording_invoker(error=RuntimeError("boom"))

    with pytest.raises(RuntimeError, match="boom"):
        _run(tmp_path, invoker)

    assert invoker.pom_texts
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_missing_pom_fails_before_invocation(
    tmp_path: Path,
    recording_invoker,
) -> None:
    invoker = recording_invoker()

    with pytest.raises(CommandFailure, match="Error generating agent pom") as error_info:
        _run(tmp_path, invoker)

    assert isinstance(error_info.value.cause, DescriptorParseError)
    assert invoker.requests == []
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_without_javafx_plugin_warns_and_still_runs(
    tmp_path: Path,
    write_pom,
    recording_invoker,
    caplog,
) -> None:
    write_pom(tmp_path, "")
    invoker = recording_invoker()

    with caplog.at_level(logging.WARNING):
        result = _run(tmp_path, invoker)

    assert isinstance(result.lookup, PluginNotFound)
    assert len(invoker.requests) == 1
    assert "native-image-agent" not in invoker.pom_texts[0]
    assert "No JavaFX plugin found" in caplog.text
    assert not (tmp_path / "agentPom.xml").exists()


def test_prepare_agent_dir_creates_missing_directory(tmp_path: Path) -> None:
    agent_dir = tmp_path / "a" / "b"

    assert prepare_agent_dir(agent_dir, AgentDirPolicy.CLEAN) == 0
    assert agent_dir.is_dir()


def test_prepare_agent_dir_merge_keeps_previous_run_files(tmp_path: Path) -> None:
    agent_dir = tmp_path / "native-image"
    agent_dir.mkdir()
    (agent_dir / "reflect-config.json").write_text("[]", "utf-8")

    assert prepare_agent_dir(agent_dir, AgentDirPolicy.MERGE) == 0
    assert (agent_dir / "reflect-config.json").exists()


def test_prepare_agent_dir_clean_removes_previous_run_files(tmp_path: Path) -> None:
    agent_dir = tmp_path / "native-image"
    (agent_dir / "agent-extracted-predefined-classes").mkdir(parents=True)
    (agent_dir / "reflect-config.json").write_text("[]", "utf-8")
    (agent_dir / "resource-config.json").write_text("{}", "utf-8")

    assert prepare_agent_dir(agent_dir, AgentDirPolicy.CLEAN) == 3
    assert agent_dir.is_dir()
    assert list(agent_dir.iterdir()) == []


def test_run_agent_patch_error_removes_stale_copy(
    tmp_path: Path,
    write_pom,
    recording_invoker,
    monkeypatch,
) -> None:
    write_pom(tmp_path)
    (tmp_path / "agentPom.xml").write_text("<project>stale</project>", "utf-8")
    invoker = recording_invoker()

    def broken_patch(*args, **kwargs):
        raise RuntimeError("patch failed")

    monkeypatch.setattr("native_maven.agent.runner.patch_descriptor", broken_patch)

    with pytest.raises(CommandFailure, match="Error generating agent pom") as error_info:
        _run(tmp_path, invoker)

    assert isinstance(error_info.value.cause, RuntimeError)
    assert invoker.requests == []
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_partial_write_is_removed(
    tmp_path: Path,
    write_pom,
    recording_invoker,
    monkeypatch,
) -> None:
    write_pom(tmp_path)
    invoker = recording_invoker()

    def partial_write(self, path: Path) -> None:
        path.write_text("<project><build>", "utf-8")
        raise DescriptorWriteError(f"Cannot write build descriptor {path}: disk full")

    monkeypatch.setattr(BuildDescriptor, "write", partial_write)

    with pytest.raises(CommandFailure, match="Error generating agent pom") as error_info:
        _run(tmp_path, invoker)

    assert isinstance(error_info.value.cause, DescriptorWriteError)
    assert invoker.requests == []
    assert not (tmp_path / "agentPom.xml").exists()


def test_run_agent_logs_when_copy_cannot_be_deleted(
    tmp_path: Path,
    write_pom,
    recording_invoker,
    caplog,
) -> None:
    write_pom(tmp_path)
    (tmp_path / "agentPom.xml").mkdir()
    invoker = recording_invoker()

    with caplog.at_level(logging.WARNING), pytest.raises(CommandFailure) as error_info:
        _run(tmp_path, invoker)

    assert isinstance(error_info.value.cause, DescriptorWriteError)
    assert invoker.requests == []
    assert "Could not delete" in caplog.text
