"""CLI tests driving the click commands against a temporary database."""

import re

from wallit.cli.main import cli

USER_ID = "user-1"


def _invoke(cli_runner, cli_obj, *args):
    return cli_runner.invoke(cli, ["--user", USER_ID, *args], obj=cli_obj())


def _created_id(output):
    match = re.search(r"\(ID: (\w+)\)", output)
    assert match, output
    return match.group(1)


def _movement_id(output):
    match = re.search(r"Created movement (\w+)", output)
    assert match, output
    return match.group(1)


def _create_account(cli_runner, cli_obj, bank="Banco Estado", last_four="1234", *extra):
    result = _invoke(cli_runner, cli_obj, "account", "create", bank, "--type", "Vista", "--last-four", last_four, *extra)
    assert result.exit_code == 0, result.output
    return _created_id(result.output)


def test_help_does_not_need_a_user(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Personal ledger" in result.output


def test_missing_user_is_rejected(cli_runner, cli_obj, monkeypatch):
    monkeypatch.delenv("WALLIT_USER", raising=False)
    result = cli_runner.invoke(cli, ["account", "list"], obj=cli_obj())
    assert result.exit_code == 1
    assert "Error: Not authenticated" in result.output


def test_create_and_list_accounts(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj, "Banco Estado", "1234", "--initial-balance", "100.000")

    result = _invoke(cli_runner, cli_obj, "account", "list")

    assert result.exit_code == 0
    assert account_id in result.output
    assert "****1234" in result.output
    assert "CLP" in result.output


def test_create_account_validation_error(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "account", "create", "Banco", "--type", "Vista", "--last-four", "12")
    assert result.exit_code == 1
    assert "Error: Last 4 digits must be exactly 4 numbers" in result.output


def test_add_movement_and_list(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)

    result = _invoke(
        cli_runner, cli_obj, "movement", "add", "Supermercado", "15.990", "--account", account_id, "--date", "2025-03-01"
    )
    assert result.exit_code == 0, result.output
    movement_id = _movement_id(result.output)

    result = _invoke(cli_runner, cli_obj, "movement", "list")
    assert result.exit_code == 0
    assert movement_id in result.output
    assert "2025-03-01" in result.output
    assert "CLP 15,990.00" in result.output
    assert "(1 of 1 movements)" in result.output


def test_add_movement_invalid_amount(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    result = _invoke(cli_runner, cli_obj, "movement", "add", "Coffee", "abc", "--account", account_id)
    assert result.exit_code == 1
    assert "Error: Invalid amount" in result.output


def test_add_movement_invalid_date(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    result = _invoke(cli_runner, cli_obj, "movement", "add", "Coffee", "2.500", "--account", account_id, "--date", "someday")
    assert result.exit_code == 1
    assert "Error: Invalid date" in result.output


def test_add_movement_unknown_account(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "movement", "add", "Coffee", "2.500", "--account", "missing")
    assert result.exit_code == 1
    assert "Error: Account missing not found" in result.output


def test_review_queue(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    first = _movement_id(
        _invoke(cli_runner, cli_obj, "movement", "add", "Uber", "7.500", "--account", account_id, "--review").output
    )
    _invoke(cli_runner, cli_obj, "movement", "add", "Lider", "20.000", "--account", account_id, "--review")

    pending = _invoke(cli_runner, cli_obj, "movement", "list", "--pending")
    assert "[review]" in pending.output
    assert "(2 of 2 movements)" in pending.output

    result = _invoke(cli_runner, cli_obj, "movement", "confirm", first, "--name", "Uber trip")
    assert result.exit_code == 0, result.output
    assert f"Confirmed movement {first} (1 left to review)" in result.output


def test_transfer_between_currencies(cli_runner, cli_obj):
    clp_id = _create_account(cli_runner, cli_obj, "Banco Estado", "1234")
    usd_id = _create_account(cli_runner, cli_obj, "Santander", "9876", "--currency", "USD")

    result = _invoke(cli_runner, cli_obj, "transfer", "create", clp_id, usd_id, "95.000", "--date", "2025-03-01")

    assert result.exit_code == 0, result.output
    assert "Created transfer" in result.output
    assert "out: CLP 95,000.00" in result.output
    assert "in:  USD 100.00" in result.output


def test_transfer_to_same_account_fails(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    result = _invoke(cli_runner, cli_obj, "transfer", "create", account_id, account_id, "1.000")
    assert result.exit_code == 1
    assert result.output.startswith("Error:")


def test_receivable_flow(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    movement_id = _movement_id(
        _invoke(cli_runner, cli_obj, "movement", "add", "Dinner", "40.000", "--account", account_id).output
    )

    result = _invoke(cli_runner, cli_obj, "receivable", "mark", movement_id, "--reminder", "Juan owes dinner")
    assert result.exit_code == 0, result.output
    assert "Marked 'Juan owes dinner' as receivable" in result.output

    listed = _invoke(cli_runner, cli_obj, "receivable", "list")
    assert movement_id in listed.output
    assert "[receivable]" in listed.output

    result = _invoke(cli_runner, cli_obj, "receivable", "receive", movement_id, "--account", account_id)
    assert result.exit_code == 0, result.output
    assert f"Receivable {movement_id} received with payment" in result.output

    assert "No receivables found." in _invoke(cli_runner, cli_obj, "receivable", "list").output
    assert "[received]" in _invoke(cli_runner, cli_obj, "receivable", "list", "--all").output


def test_receive_rejects_both_options(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "receivable", "receive", "abc", "--account", "a", "--income", "b")
    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_split_command(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    movement_id = _movement_id(
        _invoke(cli_runner, cli_obj, "movement", "add", "Lider", "90.000", "--account", account_id).output
    )

    result = _invoke(
        cli_runner, cli_obj, "split", movement_id, "--part", "Groceries=60.000", "--part", "Cleaning=30.000"
    )

    assert result.exit_code == 0, result.output
    assert f"Split movement {movement_id} into 2 parts:" in result.output
    assert "Groceries" in result.output
    assert "Cleaning" in result.output


def test_split_rejects_malformed_part(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "split", "abc", "--part", "no-amount", "--part", "x=1")
    assert result.exit_code == 1
    assert "Error: Invalid part 'no-amount'" in result.output


def test_split_with_wrong_total(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    movement_id = _movement_id(
        _invoke(cli_runner, cli_obj, "movement", "add", "Lider", "90.000", "--account", account_id).output
    )
    result = _invoke(cli_runner, cli_obj, "split", movement_id, "--part", "A=10.000", "--part", "B=10.000")
    assert result.exit_code == 1
    assert result.output.startswith("Error:")


def test_split_usd_movement_reports_local_amounts(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    movement_id = _movement_id(
        _invoke(cli_runner, cli_obj, "movement", "add", "Amazon", "10", "--account", account_id, "--currency", "USD").output
    )

    result = _invoke(cli_runner, cli_obj, "split", movement_id, "--part", "A=6", "--part", "B=4")

    assert result.exit_code == 1
    assert "Error: Split amounts add up to CLP 10.00, expected CLP 9,500.00" in result.output


def test_balance(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj, "Banco Estado", "1234", "--initial-balance", "100.000")
    _invoke(cli_runner, cli_obj, "movement", "add", "Supermercado", "15.990", "--account", account_id)

    result = _invoke(cli_runner, cli_obj, "balance")
    assert result.exit_code == 0, result.output
    assert "CLP 84,010.00" in result.output
    assert "Total" in result.output

    single = _invoke(cli_runner, cli_obj, "balance", "--account", account_id)
    assert "Banco Estado ****1234: CLP 84,010.00" in single.output


def test_balance_history_requires_account(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "balance", "--history")
    assert result.exit_code == 1
    assert "--history requires --account" in result.output


def test_rate(cli_runner, cli_obj):
    assert "No cached rate." in _invoke(cli_runner, cli_obj, "rate", "--cached").output

    result = _invoke(cli_runner, cli_obj, "rate")
    assert result.exit_code == 0, result.output
    assert "USD->CLP: CLP 950.00" in result.output

    cached = _invoke(cli_runner, cli_obj, "rate", "--cached")
    assert "USD->CLP: CLP 950.00 (from stub" in cached.output


def test_rate_unavailable_is_retryable(cli_runner, cli_obj, rate_source):
    rate_source.fail = True
    result = _invoke(cli_runner, cli_obj, "rate")
    assert result.exit_code == 1
    assert "Error: Could not fetch USD->CLP exchange rate (try again later)" in result.output


def test_report(cli_runner, cli_obj):
    account_id = _create_account(cli_runner, cli_obj)
    _invoke(
        cli_runner, cli_obj, "movement", "add", "Salary", "1.000.000", "--account", account_id,
        "--type", "income", "--date", "2025-03-01",
    )
    _invoke(cli_runner, cli_obj, "movement", "add", "Rent", "400.000", "--account", account_id, "--date", "2025-03-05")

    result = _invoke(
        cli_runner, cli_obj, "report", "--start-date", "2025-03-01", "--end-date", "2025-03-31", "--daily"
    )

    assert result.exit_code == 0, result.output
    assert "Report 2025-03-01 to 2025-03-31" in result.output
    assert "Income:    CLP 1,000,000.00" in result.output
    assert "Expenses:  CLP 400,000.00" in result.output
    assert "Net:       CLP 600,000.00" in result.output
    assert "Movements: 2" in result.output


def test_report_rejects_inverted_range(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "report", "--start-date", "2025-03-31", "--end-date", "2025-03-01")
    assert result.exit_code == 1
    assert result.output.startswith("Error:")


def test_category_commands(cli_runner, cli_obj):
    result = _invoke(cli_runner, cli_obj, "category", "create", "Food", "🍔")
    assert result.exit_code == 0, result.output
    category_id = _created_id(result.output)

    assert f"{category_id} | 🍔 Food" in _invoke(cli_runner, cli_obj, "category", "list").output

    result = _invoke(cli_runner, cli_obj, "category", "delete", category_id)
    assert result.exit_code == 0
    assert "No categories found." in _invoke(cli_runner, cli_obj, "category", "list").output
