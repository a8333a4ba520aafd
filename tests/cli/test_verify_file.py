import hashlib
from cli.verify_file import verify_file


def test_verify_file_ok_inferred_algorithm(runner, cli_obj, sample_file, sample_bytes):
    expected = hashlib.sha256(sample_bytes).hexdigest()
    result = runner.invoke(verify_file, [str(sample_file), expected], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert "sample.bin: OK" in result.output


def test_verify_file_ignores_case_and_whitespace(runner, cli_obj, sample_file, sample_bytes):
    expected = f"  {hashlib.md5(sample_bytes).hexdigest().upper()}  "
    result = runner.invoke(verify_file, [str(sample_file), expected], obj=cli_obj)

    assert result.exit_code == 0, result.output


def test_verify_file_explicit_algorithm(runner, cli_obj, sample_file, sample_bytes):
    expected = hashlib.sha1(sample_bytes).hexdigest()
    result = runner.invoke(verify_file, [str(sample_file), expected, "-a", "SHA-1"], obj=cli_obj)

    assert result.exit_code == 0, result.output


def test_verify_file_mismatch(runner, cli_obj, sample_file):
    result = runner.invoke(verify_file, [str(sample_file), "0" * 32], obj=cli_obj)

    assert result.exit_code == 1
    assert "MISMATCH" in result.output


def test_verify_file_unknown_digest_length(runner, cli_obj, sample_file):
    result = runner.invoke(verify_file, [str(sample_file), "abc123"], obj=cli_obj)

    assert result.exit_code == 1
    assert "Verification failed" in result.output


def test_verify_file_missing_path(runner, cli_obj, tmp_path):
    result = runner.invoke(verify_file, [str(tmp_path / "nope.bin"), "0" * 32], obj=cli_obj)

    assert result.exit_code == 2
