import pytest

from cablefault.main import build_parser, main, parameters_from_args
from cablefault.model.io import IOManager
from cablefault.model.state import DEFAULT_PARAMETERS


def test_parser_defaults_match_default_parameters():
    args = build_parser().parse_args([])

    assert parameters_from_args(args) == DEFAULT_PARAMETERS
    assert args.headless is False


def test_parser_overrides():
    args = build_parser().parse_args(["--fault-location", "42", "--soil-resistivity", "250"])
    params = parameters_from_args(args)

    assert params.fault_location == 42.0
    assert params.soil_resistivity == 250.0


def test_headless_run_saves_result(tmp_path):
    target = tmp_path / "field.mat"

    with pytest.raises(SystemExit) as info:
        main(["--headless", "--output", str(target), "--fault-location", "42"])

    assert info.value.code == 0
    assert IOManager.load_result(str(target)).fault_location == 42.0


def test_headless_run_with_invalid_parameters_fails(tmp_path):
    target = tmp_path / "field.h5"

    with pytest.raises(SystemExit) as info:
        main(["--headless", "--output", str(target), "--fault-resistance", "0"])

    assert info.value.code == 1
    assert not target.exists()


def test_headless_output_with_other_extension_loads_back(tmp_path):
    target = tmp_path / "field.dat"

    with pytest.raises(SystemExit) as info:
        main(["--headless", "--output", str(target)])

    assert info.value.code == 0
    assert IOManager.load_result(str(target)).parameters == DEFAULT_PARAMETERS
