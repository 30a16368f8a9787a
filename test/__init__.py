from contextlib import contextmanager


@contextmanager
def patch(owner, attr, value):
    """Replace owner.attr with value for the duration of the block.

    with patch(run, 'get_evicter', fake_get_evicter):
        run.main([])
    """
    original = getattr(owner, attr)
    setattr(owner, attr, value)
    try:
        yield value
    finally:
        setattr(owner, attr, original)
