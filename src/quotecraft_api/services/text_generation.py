"""Quote body text generation."""

from collections.abc import Callable

# (client_name, hours, price, description, template_style) -> text
QuoteTextGenerator = Callable[[str, int, int, str, str], str]


def generate_quote_text(
    client_name: str,
    hours: int,
    price: int,
    description: str,
    template_style: str = "professional",
) -> str:
    """
    Produce the body text of a quote.

    Static template for now. Any generative replacement must keep this
    signature and stay free of side effects.
    """
    return (
        f'Price quote for {client_name} for the project "{description}": '
        f"{price} ILS ({hours} hours, style: {template_style})"
    )
