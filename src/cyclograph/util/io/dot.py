"""
DOT graph emission.

A small writer for Graphviz DOT text. Nodes and edges are written in the
order they were declared, so a caller that declares them in a stable order
gets byte-identical output on every run. Identifiers that are valid DOT IDs
are written bare, everything else is quoted and escaped.
"""
import io
import re

__all__ = "Digraph", "escapeField", "quoteID"

# Characters that must be escaped inside a quoted DOT string.
makeescape = re.compile(r"[\\\n\t\"]")

lut = {"\\": r"\\", "\n": r"\n", "\t": r"\t", '"': r"\""}

bareid = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def escapeField(s):
    """
    Escape a value for use inside a double-quoted DOT string.

    Backslashes, newlines, tabs and double quotes are all rewritten in a
    single pass, so an escaped value never gets escaped twice.
    """
    return makeescape.sub(lambda c: lut[c.group()], str(s))


def quoteID(name):
    name = str(name)
    if bareid.match(name):
        return name
    return '"%s"' % escapeField(name)


def dumpAttr(attr, out):
    """Write ``attr`` as `` [k1="v1", k2="v2"]``."""
    out.write(" [")
    out.write(", ".join('%s="%s"' % (k, escapeField(v)) for k, v in attr.items()))
    out.write("]")


class Node(object):
    __slots__ = ("name", "attr")

    def __init__(self, name, **attr):
        assert isinstance(name, str)
        self.name = name
        self.attr = attr

    def dump(self, out, indent):
        out.write("%s%s" % (indent, quoteID(self.name)))
        if self.attr:
            dumpAttr(self.attr, out)
        out.write(";\n")


class Edge(object):
    __slots__ = ("src", "dst", "attr")

    def __init__(self, src, dst, **attr):
        self.src = src
        self.dst = dst
        self.attr = attr

    def dump(self, out, indent, directed):
        symbol = "->" if directed else "--"
        out.write("%s%s %s %s" % (indent, quoteID(self.src), symbol, quoteID(self.dst)))
        if self.attr:
            dumpAttr(self.attr, out)
        out.write(";\n")


class Graph(object):
    """
    A DOT graph under construction.

    Nodes must be declared before edges refer to them; declaring the same
    node twice is a programming error.
    """
    __slots__ = ("graphtype", "name", "attr", "nodes", "edges", "nameLUT", "indent")

    def __init__(self, graphtype, name, indent="  ", **attr):
        self.graphtype = graphtype
        self.name = name
        self.attr = attr
        self.indent = indent

        self.nodes = []
        self.edges = []
        self.nameLUT = {}

    def isDirected(self):
        return self.graphtype == "digraph"

    def node(self, name, **attr):
        name = str(name)
        assert name not in self.nameLUT, name
        n = Node(name, **attr)
        self.nodes.append(n)
        self.nameLUT[name] = n
        return n

    def edge(self, src, dst, **attr):
        src = str(src)
        dst = str(dst)
        assert src in self.nameLUT, "Cannot find node %s" % src
        assert dst in self.nameLUT, "Cannot find node %s" % dst
        e = Edge(src, dst, **attr)
        self.edges.append(e)
        return e

    def outputDot(self, out):
        """Write the graph to the file-like object ``out``."""
        indent = self.indent
        out.write("%s %s {\n" % (self.graphtype, quoteID(self.name)))

        for k, v in self.attr.items():
            out.write('%s%s="%s";\n' % (indent, k, escapeField(v)))

        for n in self.nodes:
            n.dump(out, indent)

        directed = self.isDirected()
        for e in self.edges:
            e.dump(out, indent, directed)

        out.write("}\n")

    def dumps(self):
        out = io.StringIO()
        self.outputDot(out)
        return out.getvalue()


def Digraph(name="G", **attr):
    """Create a new directed graph."""
    return Graph("digraph", name, **attr)
