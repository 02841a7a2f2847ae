from agitlink.cli import run

run()
