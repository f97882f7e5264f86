from rich.pretty import pprint

from hashparse import *

parser = Parser("calc", "hashparse example calculator", exit_on_help=False)


@template("add", "+", arity=99, optional=True, descr="add the numbers supplied")
def add(*numbers):
    print(sum(map(float, numbers)))


@template("mul", "*", arity=99, optional=True, descr="multiply the numbers supplied")
def mul(*numbers):
    product = 1.0
    for number in numbers:
        product *= float(number)
    print(product)


parser.add_template(add)
parser.add_template(mul)
context = parser.add("-c", 0, "calculator context")
parser.add_subcommand(context, "--add", 2, "add two numbers inside the context")


if __name__ == '__main__':
    pprint(invoke(parser))
