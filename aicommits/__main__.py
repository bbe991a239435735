from aicommits.cli.main import run

run()
