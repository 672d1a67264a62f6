"""Schema builders shared by the tests."""

from __future__ import annotations

from applet_api_desc.models import Callback, Enumeration, Field, Function, Integer, Module, Pointer, Variant


USIZE = Integer(signed=False)
ISIZE = Integer(signed=True)


def make_read(link: str = "usr", name: str = "read") -> Function:
    return Function(
        name=name,
        link=link,
        docs="Reads into a buffer.",
        params=[
            Field("ptr", Pointer(mutable=True, length="len"), "Address of the buffer."),
            Field("len", USIZE, "Length of the buffer in bytes."),
        ],
        results=[Field("len", ISIZE, "Number of bytes read.")],
    )


def make_event_module(variants=None, name: str = "serial", register_link: str = "use") -> Module:
    if variants is None:
        variants = [Variant("Read", 0, "Ready for read."), Variant("Write", 1, "Ready for write.")]
    items = [
        make_read(),
        Enumeration("Event", "Events.", variants),
        Function(
            name="register",
            link=register_link,
            docs="Registers a callback.",
            params=[Field("event", USIZE, enum="Event"), Field("handler", Callback())],
        ),
        Function(
            name="unregister",
            link="usd",
            docs="Unregisters a callback.",
            params=[Field("event", USIZE, enum="Event")],
        ),
    ]
    return Module(name=name, docs="Test module.", items=items)
