"""Shared test fixtures."""

from __future__ import annotations

import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from native_maven.invoker import InvocationRequest, InvocationResult

_POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0"
         xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
         xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/xsd/maven-4.0.0.xsd">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>hello-fx</artifactId>
    <version>1.0.0</version>
    <!-- keep me -->
    <dependencies>
        <dependency>
            <groupId>org.openjfx</groupId>
            <artifactId>javafx-controls</artifactId>
            <version>17</version>
        </dependency>
    </dependencies>
    <build>
        <plugins>
            <plugin>
                <groupId>org.apache.maven.plugins</groupId>
                <artifactId>maven-compiler-plugin</artifactId>
                <configuration>
                    <release>17</release>
                </configuration>
            </plugin>
{plugins}
        </plugins>
    </build>
</project>
"""

JAVAFX_PLUGIN_EMPTY_CONFIG = """
            <plugin>
                <groupId>org.openjfx</groupId>
                <artifactId>javafx-maven-plugin</artifactId>
                <version>0.0.8</version>
                <configuration/>
            </plugin>
"""

_ENV_VARS = (
    "GRAALVM_HOME",
    "MAVEN_HOME",
    "M2_HOME",
    "NATIVE_MAVEN_PROJECT_ROOT",
    "NATIVE_MAVEN_GRAALVM_HOME",
    "NATIVE_MAVEN_MAVEN_EXECUTABLE",
    "NATIVE_MAVEN_INVOKER_TIMEOUT_SECONDS",
    "NATIVE_MAVEN_BATCH_MODE",
    "NATIVE_MAVEN_AGENT_DIR_POLICY",
    "NATIVE_MAVEN_OUTPUT_DIR",
    "NATIVE_MAVEN_TARGET",
    "NATIVE_MAVEN_LINK_COMMAND",
    "NATIVE_MAVEN_APP_NAME",
    "NATIVE_MAVEN_MAIN_CLASS",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def write_pom() -> Callable[..., Path]:
    """Write a pom.xml into a directory with the given extra plugin blocks."""

    def _write(directory: Path, plugins: str = JAVAFX_PLUGIN_EMPTY_CONFIG) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "pom.xml"
        path.write_text(_POM_TEMPLATE.format(plugins=plugins), "utf-8")
        return path

    return _write


class RecordingInvoker:
    """Invoker double that records requests and the patched pom seen at run time."""

    def __init__(
        self,
        result: InvocationResult | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.result = result or InvocationResult(exit_code=0)
        self.error = error
        self.requests: list[InvocationRequest] = []
        self.pom_texts: list[str] = []

    def execute(self, request: InvocationRequest) -> InvocationResult:
        self.requests.append(request)
        self.pom_texts.append(request.pom_file.read_text("utf-8"))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def recording_invoker() -> type[RecordingInvoker]:
    return RecordingInvoker


@pytest.fixture()
def fake_executable(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a POSIX launcher that runs the given Python source with the test interpreter."""

    def _write(name: str, source: str) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        implementation = bin_dir / f"{name}_impl.py"
        implementation.write_text(source.strip() + "\n", "utf-8")
        launcher = bin_dir / name
        launcher.write_text(
            f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
            "utf-8",
        )
        launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)
        return launcher

    return _write
