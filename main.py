import sys

from rich.pretty import pprint

from sprig import *


class Deploy(Command):
    signature = "deploy:app {target : where to deploy} {--e|env=staging : stage} {--f|force}"
    description = "deploy the application"

    def handle(self, context, /):
        self.info(f"deploying to <b>{context.argument('target')}</b> ({context.param('env')})")
        if context.param("force"):
            self.comment("skipping safety checks")
        return 0


app = Application("sprig-demo", "0.1.0", description="sample commands")
app.register(Deploy)


@app.command("greet {name?} {--y|yell}", description="say hello")
def greet(context):
    name = context.argument("name") or app.prompt([Question("name", "text", "who are you", default="world")]).get("name")
    if name is None:
        return 1
    message = f"hello {name}"
    print(message.upper() if context.param("yell") else message)


@app.on("command.after")
def report(event):
    pprint(event.get("context"))


if __name__ == '__main__':
    sys.exit(app.run())
