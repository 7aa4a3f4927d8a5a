# basmkit

A front end for a small stack-machine assembly language. It splits
source text into instruction, label and directive lines, tokenizes
operands and directive bodies, parses expressions and statements into
plain Python objects, and renders both as text dumps or Graphviz `dot`
graphs.

## Install

```
pip install .
```

## Command line

`expr2dot` parses one expression and prints its tree as a `dot` graph:

```
expr2dot "1 + 2 * foo(3, 'a')"
```

Pipe the output into Graphviz to draw it. With no argument, or when the
expression does not parse, it prints an error to standard error and
exits with status 1.

## Library

### Expressions

```python
from basmkit.expr import parse_expr, dump_expr, dump_expr_as_dot
from basmkit.location import FileLocation

expr = parse_expr("(1 + 2) * 3", FileLocation("<input>", 1))
print(dump_expr(expr, 0))
print(dump_expr_as_dot(expr))
```

`parse_expr` returns one of `Binding`, `LitInt`, `LitFloat`, `LitChar`,
`LitStr`, `BinaryOp` or `Funcall` from `basmkit.expr`. Integer literals
are held as unsigned 64-bit values, so `-1` becomes `2**64 - 1`.
Operators are `==`, `<`, `>` (weakest), then `+`, `-`, then `*`, `/`,
`%` (strongest). String literals understand the escapes `\0`, `\n` and
`\xhh`.

For finer control, `basmkit.tokenizer.Tokenizer` gives a peekable token
stream that `parse_expr_from_tokens`, `parse_funcall_args`,
`parse_fundef_args` and `parse_lit_str` read from.

### Lines

```python
from basmkit.linizer import Linizer

for line in Linizer("%const N = 10\nloop:\n    push N ; comment\n", "prog.basm"):
    print(line.dump())
```

Empty lines are skipped and everything after `;` is dropped. A line
starting with `%` is a directive, one ending with `:` is a label, and
anything else is an instruction with an optional operand.
`Linizer.from_file(path)` reads a file from disk.

### Statements

`basmkit.parser.parse_source` parses a whole program. The instruction
set is not built in: pass a mapping from instruction names to
`basmkit.statement.InstDef` values saying whether each takes an operand.

```python
from basmkit.parser import parse_source
from basmkit.statement import Block, InstDef, dump_block, dump_statement_as_dot

instructions = {
    "push": InstDef("push", has_operand=True),
    "halt": InstDef("halt"),
}
source = "%const N = 10\nmain:\n    push N\n    halt\n%entry main\n"

statements = parse_source(source, "prog.basm", instructions)
print(dump_block(statements, 0))
print(dump_statement_as_dot(Block(statements)))
```

Supported directives are `%include`, `%const`, `%native`, `%assert`,
`%entry` (with `name:` also defining a label), `%error`,
`%if`/`%elif`/`%else`/`%end`, `%scope`, `%for ... from ... to ...`,
`%func`, `%macro`, and macro calls written as `%name(args)`.

### Targets

`basmkit.target.Target` lists the output targets by name;
`target_by_name("nasm-linux-x86-64")` looks one up (returning `None` for
an unknown name) and `Target.file_ext()` gives its file extension.

### Errors

Errors in the input are raised as `basmkit.location.BasmError`. Its
message starts with the `file:line` where the problem was found, and the
`location` and `message` attributes hold the parts.

## What this package does not do

It stops at the parsed statement tree. It does not evaluate constants
or expressions, resolve labels, expand macros or includes, emit
bytecode or assembly for any of the listed targets, verify programs, or
run or debug them. The target list only names targets and their file
extensions.

## Tests

```
pip install .[test]
pytest
```