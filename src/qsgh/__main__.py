from qsgh.cli import app

app()
