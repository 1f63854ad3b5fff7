from snips.cli import app

app()
