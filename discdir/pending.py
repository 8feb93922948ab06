import typing as t

from discdir.errors import Superseded

__all__ = ('Latest',)

T = t.TypeVar('T')


class Latest(t.Generic[T]):
    """ Tracks the requests started on behalf of one form. Only the most
    recently started request may deliver its outcome; a result or error of
    an older one raises :class:`~discdir.errors.Superseded` instead.
    Superseded requests are not cancelled, their outcome is just ignored.
    """

    def __init__(self):
        self._started = 0
        self._finished = 0

    @property
    def pending(self) -> bool:
        """ True while the most recent request is in flight. """
        return self._finished != self._started

    async def run(self, awaitable: t.Awaitable[T]) -> T:
        """ Awaits a request as the newest one of this form.

        Args:
            awaitable: The request to await.

        Returns:
            The request's result.

        Raises:
            Superseded: If another request was started while this one was in flight.
        """
        self._started += 1
        generation = self._started
        try:
            result = await awaitable
        except Exception as exc:
            if generation != self._started:
                raise Superseded() from exc
            raise exc
        finally:
            if generation == self._started:
                self._finished = generation
        if generation != self._started:
            raise Superseded()
        return result
