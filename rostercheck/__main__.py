from rostercheck.cli import app

app(prog_name="rostercheck")
