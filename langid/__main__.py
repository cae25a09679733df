from langid.api.server import run

run()
