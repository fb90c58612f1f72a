import pytest

from rocksdeps.builders import AllocatorBuilder, StorageEngineBuilder, ArtifactLocations
from rocksdeps.errors import ExternalProcessError, PathResolutionError

from conftest import FakeRunner


def _allocator(config, project, runner, logger, install_dir):
    return AllocatorBuilder(
        name="jemalloc",
        config=config.get_dependency_config("jemalloc"),
        root_dir=project,
        install_dir=install_dir,
        runner=runner,
        logger=logger,
        jobs=4,
    )


def _engine(config, project, runner, logger, install_dir, allocator=None):
    return StorageEngineBuilder(
        name="rocksdb",
        config=config.get_dependency_config("rocksdb"),
        root_dir=project,
        install_dir=install_dir,
        runner=runner,
        logger=logger,
        jobs=4,
        allocator=allocator,
    )


def _allocator_locations(install_dir):
    return ArtifactLocations(
        include_dir=install_dir / "include",
        library_dir=install_dir / "lib",
        libraries=[install_dir / "lib" / "libjemalloc.a"],
    )


def test_allocator_runs_generate_configure_make_install(config, project, logger, fake_runner, tmp_path):
    install_dir = tmp_path / "deps"
    builder = _allocator(config, project, fake_runner, logger, install_dir)

    locations = builder.execute()

    assert [c.cmd for c in fake_runner.calls] == [
        ["autoconf"],
        ["./configure", "--disable-debug", f"--prefix={install_dir}", "--with-jemalloc-prefix="],
        ["make", "-j4"],
        ["make", "install"],
    ]
    assert all(c.cwd == project / "jemalloc" for c in fake_runner.calls)
    assert locations.include_dir == install_dir / "include"
    assert locations.libraries == [install_dir / "lib" / "libjemalloc.a"]


def test_allocator_symbol_prefix_is_explicitly_empty(config, project, logger, fake_runner, tmp_path):
    builder = _allocator(config, project, fake_runner, logger, tmp_path / "deps")

    configuration = builder.build_configuration()

    assert "symbolPrefix" in configuration
    assert configuration["symbolPrefix"] == ""
    assert configuration["debug"] == "disabled"
    assert "--with-jemalloc-prefix=" in builder.configure_args(configuration)


@pytest.mark.parametrize("failing, phase, attempted", [
    ("autoconf", "generate", 1),
    ("./configure", "configure", 2),
    ("-j4", "compile", 3),
    ("install", "install", 4),
])
def test_allocator_stops_at_first_failure(config, project, logger, tmp_path, failing, phase, attempted):
    runner = FakeRunner(fail_on=lambda cmd, cwd: failing in cmd, returncode=7)
    builder = _allocator(config, project, runner, logger, tmp_path / "deps")

    with pytest.raises(ExternalProcessError) as exc:
        builder.execute()

    assert exc.value.phase == phase
    assert exc.value.kind == phase
    assert exc.value.stage == "jemalloc"
    assert exc.value.exit_status == 7
    assert len(runner.calls) == attempted


def test_allocator_requires_absolute_install_dir(config, project, logger, fake_runner):
    with pytest.raises(ValueError):
        _allocator(config, project, fake_runner, logger, "deps")


def test_missing_source_tree_is_a_resolution_error(config, tmp_path, logger, fake_runner):
    with pytest.raises(PathResolutionError):
        _allocator(config, tmp_path, fake_runner, logger, tmp_path / "deps")


def test_allocator_clean_skipped_before_configure(config, project, logger, fake_runner, tmp_path):
    builder = _allocator(config, project, fake_runner, logger, tmp_path / "deps")
    builder.clean()
    assert fake_runner.calls == []

    (project / "jemalloc" / "Makefile").write_text("")
    builder.clean()
    assert [c.cmd for c in fake_runner.calls] == [["make", "clean"]]


def test_engine_configuration_points_into_install_root(config, project, logger, fake_runner, tmp_path):
    install_dir = tmp_path / "deps"
    builder = _engine(config, project, fake_runner, logger, install_dir,
                      allocator=_allocator_locations(install_dir))

    configuration = builder.build_configuration()

    for key in ("allocatorIncludePath", "allocatorLibraryPath"):
        assert configuration[key]
        assert configuration[key].startswith(str(install_dir))
    assert configuration["allocatorLibraryPath"].endswith("libjemalloc.a")
    assert configuration["debugLevel"] == "0"
    assert configuration["installPrefix"] == str(install_dir)
    assert configuration["useExtendedRTTI"] == "1"
    assert configuration["compilerSelection"] == "1"
    assert configuration["allocatorEnabled"] == "1"


def test_engine_runs_clean_install_static_and_auxiliary(config, project, logger, fake_runner, tmp_path):
    install_dir = tmp_path / "deps"
    builder = _engine(config, project, fake_runner, logger, install_dir,
                      allocator=_allocator_locations(install_dir))

    locations = builder.execute()

    assert locations.library_dir == install_dir / "lib"
    assert locations.libraries[0] == install_dir / "lib" / "librocksdb.a"
    assert {p.name for p in locations.libraries} == {"librocksdb.a", "libz.a", "libsnappy.a", "liblz4.a", "libzstd.a"}

    cmds = [c.cmd for c in fake_runner.calls]
    assert cmds == [
        ["make", "clean"],
        ["make", "-j4", "install-static"],
        ["make", "-j4", "libz.a", "libsnappy.a", "liblz4.a", "libzstd.a"],
    ]
    install_env = fake_runner.calls[1].env
    assert install_env == {
        "DEBUG_LEVEL": "0",
        "JEMALLOC_INCLUDE": f" -I {install_dir / 'include'}/",
        "JEMALLOC_LIB": f" {install_dir / 'lib' / 'libjemalloc.a'}",
        "USE_RTTI": "1",
        "USE_CLANG": "1",
        "JEMALLOC": "1",
        "PREFIX": str(install_dir),
    }
    assert fake_runner.calls[2].env == {"DEBUG_LEVEL": "0"}


def test_engine_install_failure_skips_auxiliary(config, project, logger, tmp_path):
    install_dir = tmp_path / "deps"
    runner = FakeRunner(fail_on=lambda cmd, cwd: "install-static" in cmd)
    builder = _engine(config, project, runner, logger, install_dir,
                      allocator=_allocator_locations(install_dir))

    with pytest.raises(ExternalProcessError) as exc:
        builder.execute()

    assert exc.value.kind == "install"
    assert not any("libz.a" in c.cmd for c in runner.calls)


def test_engine_auxiliary_failure_is_fatal(config, project, logger, tmp_path):
    install_dir = tmp_path / "deps"
    runner = FakeRunner(fail_on=lambda cmd, cwd: "libsnappy.a" in cmd)
    builder = _engine(config, project, runner, logger, install_dir,
                      allocator=_allocator_locations(install_dir))

    with pytest.raises(ExternalProcessError) as exc:
        builder.execute()

    assert exc.value.kind == "compile"


def test_engine_without_allocator_refuses_to_configure(config, project, logger, fake_runner, tmp_path):
    builder = _engine(config, project, fake_runner, logger, tmp_path / "deps")

    with pytest.raises(ValueError):
        builder.build_configuration()
    builder.clean()
    assert [c.cmd for c in fake_runner.calls] == [["make", "clean"]]
