from cli.main import file_hasher_cli


if __name__ == '__main__':
    file_hasher_cli()
