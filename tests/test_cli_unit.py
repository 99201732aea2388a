from __future__ import annotations

import pytest

from ringtail.cli import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, main


@pytest.mark.unit
def test_cli_tail_writes_raw_bytes(numbered_file, tmp_path, capsysbinary):
    rc = main(['--cwd', str(tmp_path), 'tail', '-n', '2', 'numbered.txt'])
    assert rc == EXIT_OK
    out, _ = capsysbinary.readouterr()
    assert out == b'line 19\nline 20\n'


@pytest.mark.unit
def test_cli_defaults_to_ten_lines(numbered_file, capsysbinary):
    rc = main(['tail', str(numbered_file)])
    assert rc == EXIT_OK
    out, _ = capsysbinary.readouterr()
    assert len(out.splitlines()) == 10


@pytest.mark.unit
def test_cli_cwd_from_environment(numbered_file, tmp_path, monkeypatch, capsysbinary):
    monkeypatch.setenv('RINGTAIL_ROOT', str(tmp_path))
    monkeypatch.setenv('RINGTAIL_DEFAULT_LINES', '1')
    assert main(['tail', 'numbered.txt']) == EXIT_OK
    out, _ = capsysbinary.readouterr()
    assert out == b'line 20\n'


@pytest.mark.unit
def test_cli_missing_file_reports_error(tmp_path, capsys):
    rc = main(['--cwd', str(tmp_path), 'tail', 'missing.txt'])
    assert rc == EXIT_FAILURE
    _, err = capsys.readouterr()
    assert err.startswith('ringtail: tail: ')
    assert 'no such file' in err


@pytest.mark.unit
def test_cli_unknown_command_and_bad_args(tmp_path, capsys):
    assert main(['--cwd', str(tmp_path), 'cat', 'x']) == EXIT_USAGE
    assert 'unknown command: cat' in capsys.readouterr().err
    assert main(['--cwd', str(tmp_path), 'tail', '-n', 'zero', 'x']) == EXIT_USAGE


@pytest.mark.unit
def test_cli_ls_and_pwd(tmp_path, capsysbinary):
    (tmp_path / 'one.log').write_text('')
    assert main(['--cwd', str(tmp_path), 'ls']) == EXIT_OK
    assert capsysbinary.readouterr().out == b'one.log\n'
    assert main(['--cwd', str(tmp_path), 'pwd']) == EXIT_OK
    assert capsysbinary.readouterr().out == f'{tmp_path}\n'.encode()


@pytest.mark.unit
def test_cli_log_level_option(tmp_path, capsysbinary):
    import logging

    assert main(['--log-level', 'debug', '--cwd', str(tmp_path), 'pwd']) == EXIT_OK
    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.unit
def test_cli_bad_numeric_setting_is_usage_error(numbered_file, monkeypatch, capsys):
    monkeypatch.setenv('RINGTAIL_DEFAULT_LINES', 'abc')
    rc = main(['tail', str(numbered_file)])
    assert rc == EXIT_USAGE
    _, err = capsys.readouterr()
    assert err.startswith('ringtail: RINGTAIL_DEFAULT_LINES must be a number')
