import pytest

from basmkit.target import Target, target_by_name


def test_every_target_round_trips_through_its_name():
    for target in Target:
        assert target_by_name(target.value) is target


def test_unknown_name_gives_none():
    assert target_by_name("nasm-plan9-x86-64") is None
    assert target_by_name("") is None


@pytest.mark.parametrize(
    "name, ext",
    [
        ("bm", ".bm"),
        ("nasm-linux-x86-64", ".asm"),
        ("nasm-freebsd-x86-64", ".S"),
        ("nasm-windows-x86-64", ".asm"),
        ("nasm-macos-x86-64", ".asm"),
        ("gas-freebsd-arm64", ".S"),
    ],
)
def test_file_extensions(name, ext):
    assert target_by_name(name).file_ext() == ext


def test_target_count_and_str():
    names = [target.value for target in Target]
    assert len(names) == 6
    found = target_by_name("gas-freebsd-arm64")
    assert found is Target.GAS_FREEBSD_ARM64
    assert str(found) == "gas-freebsd-arm64"


def test_every_extension_starts_with_dot():
    for target in Target:
        ext = target_by_name(target.value).file_ext()
        assert ext.startswith(".")
        assert len(ext) > 1