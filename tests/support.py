"""
Shared test support: sample documents in the three supported XML shapes,
an in-memory blob store with call counters and a hand-driven clock.
"""
from typing import Dict, List, Optional

from core.errors import BlobNotFoundError, StorageUnavailableError
from storage.base import BlobInfo, BlobStore


# =============================================================================
# Sample documents
# =============================================================================

OSIS_KJV = b"""<?xml version="1.0" encoding="UTF-8"?>
<osis xmlns="http://www.bibletechnologies.net/2003/OSIS/namespace">
  <osisText osisIDWork="KJV" xml:lang="en">
    <header>
      <work osisWork="KJV">
        <title>King James Version</title>
        <rights>Public Domain</rights>
        <language>en</language>
      </work>
    </header>
    <div type="book" osisID="Gen">
      <chapter osisID="Gen.1">
        <verse osisID="Gen.1.1">In the beginning God created the heaven and the earth.</verse>
        <verse osisID="Gen.1.2">And the earth was without form, and void.</verse>
      </chapter>
    </div>
    <div type="book" osisID="John">
      <chapter osisID="John.3">
        <title>Jesus and Nicodemus</title>
        <verse osisID="John.3.16">For God so loved the world,
          that he gave his only begotten Son.</verse>
        <verse osisID="John.3.17">For God sent not his Son into the world to condemn the world.</verse>
        <verse osisID="John.3.18">He that believeth on him is not condemned.<note>Or, judged</note></verse>
      </chapter>
    </div>
  </osisText>
</osis>
"""

OSIS_MILESTONES = b"""<?xml version="1.0" encoding="UTF-8"?>
<osis xmlns="http://www.bibletechnologies.net/2003/OSIS/namespace">
  <osisText osisIDWork="WEB" xml:lang="en">
    <div type="book" osisID="Ps">
      <chapter sID="Ps.23" osisID="Ps.23"/>
      <verse sID="Ps.23.1" osisID="Ps.23.1"/>Yahweh is my shepherd: I shall lack nothing.<verse eID="Ps.23.1"/>
      <verse sID="Ps.23.2" osisID="Ps.23.2"/>He makes me lie down in green pastures.<verse eID="Ps.23.2"/>
      <chapter eID="Ps.23"/>
    </div>
  </osisText>
</osis>
"""

USFX_CORNILESCU = """<?xml version="1.0" encoding="UTF-8"?>
<usfx>
  <languageCode>ron</languageCode>
  <book id="JHN">
    <id id="JHN">Cornilescu</id>
    <h>Ioan</h>
    <c id="3"/>
    <s>Isus și Nicodim</s>
    <p><v id="16"/>Fiindcă atât de mult a iubit Dumnezeu lumea,<f>nota</f> că a dat pe singurul Lui Fiu.<ve/>
    <v id="17"/>Dumnezeu, în adevăr, n-a trimis pe Fiul Său în lume ca să judece lumea.<ve/></p>
  </book>
</usfx>
""".encode("utf-8")

USFX_CONTAINERS = b"""<?xml version="1.0" encoding="UTF-8"?>
<usfx>
  <book id="JHN">
    <c id="3"/>
    <p><v id="16">For God so loved the world,<f>note</f> that he gave his only begotten Son.</v>
    <v id="17">For God sent not his Son into the world to condemn the world.</v></p>
  </book>
</usfx>
"""

ZEFANIA_RVR = """<?xml version="1.0" encoding="UTF-8"?>
<XMLBIBLE biblename="Reina Valera 1909">
  <INFORMATION>
    <title>Reina-Valera 1909</title>
    <rights>Dominio Público</rights>
    <language>SPA</language>
  </INFORMATION>
  <BIBLEBOOK bnumber="1" bname="Génesis">
    <CHAPTER cnumber="1">
      <VERS vnumber="1">En el principio crió Dios los cielos y la tierra.</VERS>
    </CHAPTER>
  </BIBLEBOOK>
  <BIBLEBOOK bnumber="43" bname="Juan">
    <CHAPTER cnumber="3">
      <VERS vnumber="16">Porque de tal manera amó Dios al mundo, que ha dado á su Hijo unigénito.</VERS>
    </CHAPTER>
  </BIBLEBOOK>
</XMLBIBLE>
""".encode("utf-8")

MALFORMED = b"<?xml version='1.0'?>\n<osis>\n  <osisText>\n    <div type='book'\n</osis>"


# =============================================================================
# Fakes
# =============================================================================

class FakeBlobStore(BlobStore):
    """In-memory BlobStore that counts calls and can be switched offline."""

    backend = "memory"

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None):
        self.blobs: Dict[str, bytes] = dict(blobs or {})
        self.fetch_calls: List[str] = []
        self.list_calls = 0
        self.ping_calls = 0
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Store is offline", backend=self.backend)

    async def fetch(self, key: str) -> bytes:
        self.fetch_calls.append(key)
        self._check_available()
        if key not in self.blobs:
            raise BlobNotFoundError(f"No blob '{key}'", key=key, backend=self.backend)
        return self.blobs[key]

    async def list_blobs(self, prefix: str = "", limit: Optional[int] = None) -> List[BlobInfo]:
        self.list_calls += 1
        self._check_available()
        names = [name for name in self.blobs if name.startswith(prefix)]
        if limit is not None:
            names = names[:limit]
        return [BlobInfo(name=name, size=len(self.blobs[name])) for name in names]

    async def ping(self) -> None:
        self.ping_calls += 1
        self._check_available()


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
