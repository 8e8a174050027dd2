import pathlib
import typing


PathLike = typing.Union[str, pathlib.Path]


class NonExistentPathError(Exception):

    def __init__(self, path: str=None):
        self._path = path

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = "The requested path"
        return self._path

    def __str__(self):
        return f"{self.path} does not exist."


def existing(*args: PathLike) -> pathlib.Path:
    """Create a full path to an existing file or directory.

    The path is fully resolved with the user wildcard expanded.

    Raises
    ------
    `~iotools.NonExistentPathError`
        The requested path does not exist.
    """
    path = pathlib.Path(*args).expanduser().resolve()
    if not path.exists():
        raise NonExistentPathError(path)
    return path


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The paths to search, in the order given. Each member must be an object
        that can represent a path on the current file system. This function
        will skip members that are `None` or that do not exist, so that callers
        may include optional locations (e.g., from environment variables).

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the file, if found.
    """
    for p in paths:
        if p is None:
            continue
        try:
            path = existing(p)
        except NonExistentPathError:
            continue
        if path.is_dir():
            test = path / str(file)
            if test.exists():
                return test
