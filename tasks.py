from invoke import task


@task
def lint(c):
    c.run("ruff check .")


@task
def format_check(c):
    c.run("ruff format --check .")


@task
def test(c):
    c.run("pytest")


@task
def monthly(c, month=""):
    c.run(f"python scripts/run_monthly_update.py {month}".strip())


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)
