from typing import Dict, Iterator, Optional

from tftboard.models import Profile


class ProfileStore:
  """
  Display name -> most recent Profile.

  Owned by the caller (the app keeps one on `app.state`) and handed to the
  fetchers, so the analysis routes can reuse a profile without refetching.
  Every write replaces the whole record for that name.
  """

  def __init__(self):
    self._profiles: Dict[str, Profile] = {}

  def put(self, display_name: str, profile: Profile) -> None:
    self._profiles[display_name] = profile

  def get(self, display_name: str) -> Optional[Profile]:
    return self._profiles.get(display_name)

  def __contains__(self, display_name: object) -> bool:
    return display_name in self._profiles

  def __len__(self) -> int:
    return len(self._profiles)

  def __iter__(self) -> Iterator[str]:
    return iter(list(self._profiles))
