from sprout import *


@command(
    descr="Deploy the application",
    aliases=("d",),
    args={"env": Argument(required=True, choices=("staging", "production"))},
    flags={
        "force": Flag("boolean", alias="f", descr="Skip confirmation"),
        "replicas": Flag("number", alias="r", default=1),
    },
)
async def deploy(context):
    context.print.success(f"deploying to {context.args['env']} x{context.flags['replicas']}")


if __name__ == '__main__':
    raise SystemExit(build("demo").command(deploy).help().version("0.1.0").debug().create().invoke())
