from packages.detector.detect import ENV_CANDIDATES, detect


def test_detects_standard_files(tmp_path) -> None:
    for name in ("docker-compose.yml", "compose.yaml", ".env", ".env.sample", ".env.example", "go.mod", "package.json", "README.md", "Makefile"):
        (tmp_path / name).write_text("")

    artifacts = detect(tmp_path)

    assert [a.path for a in artifacts.compose_files] == ["compose.yaml", "docker-compose.yml"]
    assert [a.path for a in artifacts.env_files] == list(ENV_CANDIDATES)
    assert [a.found for a in artifacts.env_files] == [True, False, False, False]
    assert [a.path for a in artifacts.env_examples] == [".env.example", ".env.sample"]
    assert [a.path for a in artifacts.manifests] == ["package.json", "go.mod"]
    assert artifacts.detected_language == "nodejs"
    assert artifacts.package_manager == "go mod"
    assert artifacts.readme.path == "README.md"
    assert artifacts.makefile.path == "Makefile"


def test_empty_directory(tmp_path) -> None:
    artifacts = detect(tmp_path)
    assert artifacts.compose_files == []
    assert not artifacts.has_env()
    assert artifacts.env_examples == []
    assert artifacts.detected_language is None
    assert artifacts.readme is None


def test_compose_override_replaces_candidates(tmp_path) -> None:
    (tmp_path / "compose.yaml").write_text("")
    (tmp_path / "deploy").mkdir()
    (tmp_path / "deploy" / "stack.yml").write_text("")

    artifacts = detect(tmp_path, compose_override="deploy/stack.yml")
    assert [(a.path, a.found) for a in artifacts.compose_files] == [("deploy/stack.yml", True)]

    missing = detect(tmp_path, compose_override="nope.yml")
    assert [(a.path, a.found) for a in missing.compose_files] == [("nope.yml", False), ("compose.yaml", True)]


def test_env_overrides_are_classified(tmp_path) -> None:
    (tmp_path / "config.env").write_text("")
    (tmp_path / "config.example.env").write_text("")

    artifacts = detect(tmp_path, env_overrides=["config.env", "config.example.env", "missing.env"])

    assert [(a.path, a.found) for a in artifacts.env_files] == [("config.env", True), ("missing.env", False)]
    assert [a.path for a in artifacts.env_examples] == ["config.example.env"]


def test_glob_manifests(tmp_path) -> None:
    (tmp_path / "App.csproj").write_text("")

    artifacts = detect(tmp_path)

    assert artifacts.manifests[0].path == "App.csproj"
    assert artifacts.detected_language == "csharp"
    assert artifacts.package_manager == "dotnet"
