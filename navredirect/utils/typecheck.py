import typing
from types import UnionType


def check_option_type(name: str, value: typing.Any, typeinfo: typing.Any) -> None:
    """
    Check if the provided value is an instance of typeinfo and raises a
    TypeError otherwise. This function supports only those types required for
    options.
    """
    e = TypeError(f"Expected {typeinfo} for {name}, but got {type(value)}.")

    origin = typing.get_origin(typeinfo)

    if origin is typing.Union or origin is UnionType:
        for T in typing.get_args(typeinfo):
            try:
                check_option_type(name, value, T)
            except TypeError:
                pass
            else:
                return
        raise e
    elif typeinfo is typing.Any:
        return
    elif not isinstance(value, typeinfo):
        raise e
    elif typeinfo is int and isinstance(value, bool):
        # bool is a subclass of int, but never a valid int option.
        raise e


def typespec_to_str(typespec: typing.Any) -> str:
    if typespec in (str, int, bool):
        t = typespec.__name__
    elif typespec == typing.Optional[str]:
        t = "optional str"
    elif typespec == typing.Optional[int]:
        t = "optional int"
    else:
        raise NotImplementedError
    return t
