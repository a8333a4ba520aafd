import json
from cli.hash_text import hash_text

ABC_DIGESTS = {
    "MD5": "900150983cd24fb0d6963f7d28e17f72",
    "SHA-1": "a9993e364706816aba3e25717850c26c9cd0d89d",
    "SHA-256": "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad",
}


def test_hash_text_json(runner, cli_obj):
    result = runner.invoke(hash_text, ["abc", "-a", "md5", "-a", "sha1", "-a", "sha256", "--json"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["name"] == "text"
    assert data["size"] == 3
    assert data["digests"] == ABC_DIGESTS


def test_hash_text_utf8(runner, cli_obj):
    result = runner.invoke(hash_text, ["héllo", "-a", "md5", "--json"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["size"] == 6


def test_hash_text_table(runner, cli_obj):
    result = runner.invoke(hash_text, ["abc", "-a", "md5"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert ABC_DIGESTS["MD5"] in result.output


def test_hash_text_unknown_algorithm(runner, cli_obj):
    result = runner.invoke(hash_text, ["abc", "-a", "crc32"], obj=cli_obj)

    assert result.exit_code == 1
    assert "Hashing failed" in result.output
