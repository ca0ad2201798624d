from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

import click

from osutools.beatmap import Beatmap
from osutools.formats import LOADERS
from osutools.formats.enum import Format
from osutools.formats.guess import guess_format


def loader_option(*args: Any, **kwargs: Any) -> Callable:
    return click.option(
        *args, callback=add_to_dict("loader_options"), expose_value=False, **kwargs
    )


def add_to_dict(
    key: str,
) -> Callable[[click.Context, Union[click.Option, click.Parameter], Any], None]:
    def add_to_key(
        ctx: click.Context, param: Union[click.Option, click.Parameter], value: Any
    ) -> None:
        # Avoid shadowing the loader's own keyword defaults with the default
        # values chosen by click
        assert param.name is not None
        if not parameter_is_a_click_default(ctx, param.name):
            ctx.params.setdefault(key, {})[param.name] = value

    return add_to_key


def parameter_is_a_click_default(
    ctx: click.Context,
    name: str,
) -> bool:
    return ctx.get_parameter_source(name) in (
        click.core.ParameterSource.DEFAULT,
        click.core.ParameterSource.DEFAULT_MAP,
    )


def load_beatmap(
    src: Path,
    input_format: Optional[Format],
    loader_options: Optional[Dict[str, Any]],
) -> Tuple[Format, Beatmap]:
    if input_format is None:
        input_format = guess_format(src)
        click.echo(f"Detected input file format : {input_format.value}", err=True)

    try:
        loader = LOADERS[input_format]
    except KeyError:
        raise ValueError(f"Unsupported input format : {input_format}")

    return input_format, loader(src, **(loader_options or {}))


strict_option = loader_option(
    "--strict",
    "strict",
    is_flag=True,
    help=(
        "Refuse sliders whose edge sounds or edge sets don't have one entry "
        "per edge instead of fixing them"
    ),
)
