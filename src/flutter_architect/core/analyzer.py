"""Project analysis — collect everything an agent needs to diagnose a project.

Sections: structure, dependencies, configuration, issues, Flutter environment.
format_report() renders them as Markdown for the MCP client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from flutter_architect.core.flutter import flutter_version
from flutter_architect.core.process_runner import ProcessRunner


@dataclass
class ProjectAnalysis:
    structure: dict[str, object] = field(default_factory=dict)
    dependencies: dict[str, object] = field(default_factory=dict)
    configuration: dict[str, object] = field(default_factory=dict)
    issues: dict[str, object] = field(default_factory=dict)
    flutter_version: str = "Unknown"
    code_samples: dict[str, str] = field(default_factory=dict)


def _read(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8", errors="replace")


def _structure(project: Path) -> dict[str, object]:
    features_dir = project / "lib" / "features"
    features = (
        sorted(p.name for p in features_dir.iterdir() if p.is_dir())
        if features_dir.is_dir()
        else []
    )
    return {
        "has_pubspec": (project / "pubspec.yaml").is_file(),
        "has_main": (project / "lib" / "main.dart").is_file(),
        "has_android": (project / "android").is_dir(),
        "has_ios": (project / "ios").is_dir(),
        "has_web": (project / "web").is_dir(),
        "features": features,
    }


def _dependencies(project: Path) -> dict[str, object]:
    lockfile = _read(project / "pubspec.lock")
    return {
        "pubspec_content": _read(project / "pubspec.yaml"),
        "has_lockfile": lockfile is not None,
    }


def _configuration(project: Path) -> dict[str, object]:
    return {
        "android_build_gradle": _read(project / "android" / "app" / "build.gradle"),
        "android_manifest": _read(
            project / "android" / "app" / "src" / "main" / "AndroidManifest.xml"
        ),
        "has_env_dev": (project / ".env.dev").is_file(),
        "has_env_prod": (project / ".env.prod").is_file(),
    }


def _issues(project: Path, runner: ProcessRunner, flutter_bin: str) -> dict[str, object]:
    pub_get = runner.run([flutter_bin, "pub", "get"], cwd=str(project))
    analyze = runner.run([flutter_bin, "analyze"], cwd=str(project))
    return {
        "pub_get_exit_code": pub_get.exit_code,
        "pub_get_stderr": pub_get.stderr,
        "analyze_exit_code": analyze.exit_code,
        "analyze_output": analyze.output,
        "has_dart_tool": (project / ".dart_tool").is_dir(),
        "has_build_dir": (project / "build").is_dir(),
    }


def analyze_project(
    project: Path,
    runner: ProcessRunner,
    *,
    flutter_bin: str = "flutter",
    include_code_samples: bool = False,
) -> ProjectAnalysis:
    analysis = ProjectAnalysis(
        structure=_structure(project),
        dependencies=_dependencies(project),
        configuration=_configuration(project),
        issues=_issues(project, runner, flutter_bin),
        flutter_version=flutter_version(runner, flutter_bin),
    )
    if include_code_samples:
        main = _read(project / "lib" / "main.dart")
        if main is not None:
            analysis.code_samples["lib/main.dart"] = main
    return analysis


def _fenced(lang: str, body: object) -> list[str]:
    return [f"```{lang}", str(body), "```", ""]


def format_report(analysis: ProjectAnalysis) -> str:
    s, d, c, i = analysis.structure, analysis.dependencies, analysis.configuration, analysis.issues
    out = ["# FLUTTER PROJECT ANALYSIS", "", "## Project Structure"]
    out += [
        f"Pubspec: {s['has_pubspec']}",
        f"Main.dart: {s['has_main']}",
        f"Android: {s['has_android']}",
        f"iOS: {s['has_ios']}",
        f"Web: {s['has_web']}",
        f"Features: {', '.join(s['features'])}",  # type: ignore[arg-type]
        "",
        "## Dependencies",
        "pubspec.yaml:",
    ]
    out += _fenced("yaml", d["pubspec_content"] or "Not found")
    if d["has_lockfile"]:
        out.append("Has pubspec.lock: ✅")
    else:
        out.append("Has pubspec.lock: ❌ (Need to run pub get)")
    out += ["", "## Configuration"]
    if c["android_build_gradle"] is not None:
        out.append("android/app/build.gradle:")
        out += _fenced("gradle", c["android_build_gradle"])
    if c["android_manifest"] is not None:
        out.append("AndroidManifest.xml:")
        out += _fenced("xml", c["android_manifest"])
    out.append(f".env.dev: {c['has_env_dev']}, .env.prod: {c['has_env_prod']}")

    out += ["", "## Issues & Errors", "### Pub Get Result", f"Exit Code: {i['pub_get_exit_code']}"]
    if i["pub_get_exit_code"] != 0:
        out.append("STDERR:")
        out += _fenced("", i["pub_get_stderr"])
    out += ["", "### Flutter Analyze Result", f"Exit Code: {i['analyze_exit_code']}"]
    if i["analyze_exit_code"] != 0:
        out.append("Output:")
        out += _fenced("", i["analyze_output"])

    out += ["", "## Flutter Environment"]
    out += _fenced("", analysis.flutter_version)

    for rel, content in analysis.code_samples.items():
        out += [f"## {rel}"]
        out += _fenced("dart", content)

    out += [
        "## Instructions for AI",
        "Please analyze the above information and:",
        "1. Identify any errors or issues",
        "2. Suggest specific fixes (file paths + exact changes)",
        "3. Prioritize fixes by importance",
        "4. Use the apply_code_fix tool to apply each fix",
    ]
    return "\n".join(out)
