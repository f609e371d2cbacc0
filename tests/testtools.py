" Sample commands shared by the tests "
from clikernel import BaseCommand, CommandSpec


class Serve(BaseCommand):
    spec = CommandSpec("serve", description="Start the AdonisJS HTTP server")


class MakeController(BaseCommand):
    spec = (
        CommandSpec("make:controller", description="Make a new HTTP controller", aliases=["mc"])
        .define_argument("name", type="string", description="Name of the controller")
        .define_flag("resource", type="boolean", description="Add resourceful methods", default=False)
    )

    async def run(self):
        return {"name": self.name, "resource": self.resource}


class MakeModel(BaseCommand):
    spec = CommandSpec("make:model", description="Make a new model").define_argument("name", type="string")


class Recorder:
    "Collects calls made by hooks and lifecycle methods"

    def __init__(self):
        self.calls = []

    def __call__(self, name):
        def _record(*args):
            self.calls.append((name, *args))

        return _record
