from tubegrab.cli import app

app(prog_name="tubegrab")
