from mentor_proxy.main import run

run()
