from airgrab.cli.main import app

app(prog_name="airgrab")
