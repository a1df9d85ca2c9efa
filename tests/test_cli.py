import pytest

from costbasis import cli

WASH_QIF = """!Type:Invst
D1/ 1'20
NBuy
YACME Fund
I10
Q10
T100
^
D1/11'20
NSell
YACME Fund
Q10
^
D1/22'20
NBuy
YACME Fund
I8
Q10
T80
^
"""

WASH_SUPPLEMENT = """Security ACME Fund
Sale 1/11'20 5.00 50.00 10
"""

OVERSOLD_QIF = """!Type:Invst
D1/ 1'20
NBuy
YBad Fund
Q5
T50
^
D2/ 1'20
NSell
YBad Fund
Q10
^
D1/ 1'20
NBuy
YGood Fund
Q5
T50
^
D2/ 1'20
NSell
YGood Fund
Q5
^
"""


@pytest.fixture
def write_inputs(tmp_path):
    def _write(qif_text, supplement_text=None, encoding="utf-8"):
        qif_path = tmp_path / "account.qif"
        qif_path.write_text(qif_text, encoding=encoding)
        paths = [str(qif_path)]
        if supplement_text is not None:
            supp_path = tmp_path / "sales.txt"
            supp_path.write_text(supplement_text, encoding=encoding)
            paths.append(str(supp_path))
        return paths

    return _write


def test_wash_sale_report(write_inputs, capsys):
    status = cli.main(write_inputs(WASH_QIF, WASH_SUPPLEMENT))

    assert status == 0
    out = capsys.readouterr().out
    assert "Transactions for ACME Fund" in out
    assert "2020-01-11: SELL 10.0000 shares at 5.0000 for 50.00" in out
    assert " ** Wash sale for lot 2020-01-22: 50.00 (10.0000 shares)" in out
    assert " *** Wash sale total: 50.00" in out


def test_without_supplement_no_wash_sales(write_inputs, capsys):
    status = cli.main(write_inputs(WASH_QIF))

    assert status == 0
    out = capsys.readouterr().out
    assert "2020-01-11: SELL 10.0000" in out
    assert "Wash sale" not in out


def test_missing_sale_price_fails(write_inputs):
    supplement = "Security ACME Fund\n"
    assert cli.main(write_inputs(WASH_QIF, supplement)) == 1


def test_oversell_stops_report(write_inputs, capsys):
    status = cli.main(write_inputs(OVERSOLD_QIF))

    assert status == 1
    assert "Good Fund" not in capsys.readouterr().out


def test_keep_going_reports_other_securities(write_inputs, capsys):
    status = cli.main(write_inputs(OVERSOLD_QIF) + ["--keep-going"])

    assert status == 1
    out = capsys.readouterr().out
    assert "Transactions for Good Fund" in out
    assert "Transactions for Bad Fund" not in out


def test_show_lots(write_inputs, capsys):
    assert cli.main(write_inputs(WASH_QIF) + ["-l"]) == 0
    assert "  Lots:" in capsys.readouterr().out


def test_export_dir(write_inputs, tmp_path):
    export_dir = tmp_path / "exports"
    args = cli.build_parser().parse_args(
        write_inputs(WASH_QIF, WASH_SUPPLEMENT) + ["--export-dir", str(export_dir), "--format", "csv"]
    )

    result = cli.run_report(args)

    assert result.status == 0
    assert (export_dir / "sale_lots.csv").exists()
    assert (export_dir / "wash_sales.csv").exists()
    assert set(result.details["outputs"]) == {"sale_lots_csv", "wash_sales_csv"}


def test_missing_qif_file_exits_nonzero(tmp_path):
    assert cli.main([str(tmp_path / "missing.qif")]) == 1


def test_latin1_input_files(write_inputs, capsys):
    qif_text = WASH_QIF.replace("ACME Fund", "Café Fund")
    supplement_text = WASH_SUPPLEMENT.replace("ACME Fund", "Café Fund")

    status = cli.main(write_inputs(qif_text, supplement_text, encoding="latin-1"))

    assert status == 0
    out = capsys.readouterr().out
    assert "Transactions for Café Fund" in out
    assert " *** Wash sale total: 50.00" in out


def test_undecodable_input_exits_nonzero(write_inputs):
    qif_text = WASH_QIF.replace("ACME Fund", "Café Fund")
    paths = write_inputs(qif_text, encoding="latin-1")

    assert cli.main(paths + ["--encoding", "ascii"]) == 1


def test_split_without_ratio_exits_nonzero(write_inputs, capsys):
    qif_text = WASH_QIF + "D2/ 1'20\nNStkSplit\nYACME Fund\nQ0\n^\n"

    assert cli.main(write_inputs(qif_text)) == 1
    assert "Transactions for ACME Fund" not in capsys.readouterr().out
