"""Unit tests for Fedora profile parsing and record JSON mapping.

WHY: Every dump starts from these profiles. A missed field is silently
lost from every copied object.

HOW: Parse sample profile documents as Fedora 3.x returns them and
check each mapped field, then check the JSON key mapping both ways.
"""

from f3cp.remote.models import (
    DatastreamRecord,
    ObjectRecord,
    SearchPage,
    parse_datastream_list,
)

OBJECT_PROFILE = b"""<?xml version="1.0" encoding="UTF-8"?>
<objectProfile xmlns="http://www.fedora.info/definitions/1/0/access/" pid="und:abc">
  <objLabel>Sample object</objLabel>
  <objOwnerId>fedoraAdmin</objOwnerId>
  <objModels><model>info:fedora/fedora-system:FedoraObject-3.0</model></objModels>
  <objCreateDate>2014-01-02T03:04:05.000Z</objCreateDate>
  <objLastModDate>2015-01-02T03:04:05.000Z</objLastModDate>
  <objState>A</objState>
</objectProfile>
"""

DATASTREAM_PROFILE = b"""<?xml version="1.0" encoding="UTF-8"?>
<datastreamProfile xmlns="http://www.fedora.info/definitions/1/0/management/" pid="und:abc" dsID="content">
  <dsLabel>photo.png</dsLabel>
  <dsVersionID>content.0</dsVersionID>
  <dsCreateDate>2014-01-02T03:04:05.000Z</dsCreateDate>
  <dsState>A</dsState>
  <dsMIME>image/png</dsMIME>
  <dsFormatURI></dsFormatURI>
  <dsControlGroup>M</dsControlGroup>
  <dsSize>1234</dsSize>
  <dsVersionable>true</dsVersionable>
  <dsInfoType></dsInfoType>
  <dsLocation>und:abc+content+content.0</dsLocation>
  <dsLocationType>INTERNAL_ID</dsLocationType>
  <dsChecksumType>MD5</dsChecksumType>
  <dsChecksum>d41d8cd98f00b204e9800998ecf8427e</dsChecksum>
</datastreamProfile>
"""

DATASTREAM_LIST = b"""<?xml version="1.0" encoding="UTF-8"?>
<objectDatastreams xmlns="http://www.fedora.info/definitions/1/0/access/" pid="und:abc" baseURL="http://localhost:8080/fedora/">
  <datastream dsid="DC" label="Dublin Core Record for this object" mimeType="text/xml"/>
  <datastream dsid="RELS-EXT" label="Fedora Object-to-Object Relationship Metadata" mimeType="application/rdf+xml"/>
  <datastream dsid="content" label="photo.png" mimeType="image/png"/>
</objectDatastreams>
"""

SEARCH_PAGE = b"""<?xml version="1.0" encoding="UTF-8"?>
<result xmlns="http://www.fedora.info/definitions/1/0/types/">
  <listSession>
    <token>abc123token</token>
    <cursor>0</cursor>
  </listSession>
  <resultList>
    <objectFields><pid>und:1</pid></objectFields>
    <objectFields><pid>und:2</pid></objectFields>
  </resultList>
</result>
"""

LAST_SEARCH_PAGE = b"""<result xmlns="http://www.fedora.info/definitions/1/0/types/">
  <resultList><objectFields><pid>und:3</pid></objectFields></resultList>
</result>
"""


class TestObjectRecord:
    """Object profile parsing and JSON mapping."""

    def test_from_xml(self):
        record = ObjectRecord.from_xml(OBJECT_PROFILE)
        assert record == ObjectRecord(
            pid="und:abc",
            label="Sample object",
            created="2014-01-02T03:04:05.000Z",
            modified="2015-01-02T03:04:05.000Z",
            state="A",
        )

    def test_to_dict_keys(self):
        record = ObjectRecord.from_xml(OBJECT_PROFILE)
        assert list(record.to_dict()) == ["PID", "Label", "CreatedDate", "LastModified", "State"]

    def test_from_dict_tolerates_missing_keys(self):
        record = ObjectRecord.from_dict({"PID": "und:x", "Label": None})
        assert record == ObjectRecord(pid="und:x")


class TestDatastreamRecord:
    """Datastream profile parsing and JSON mapping."""

    def test_from_xml(self):
        record = DatastreamRecord.from_xml(DATASTREAM_PROFILE)
        assert record.name == "content"
        assert record.label == "photo.png"
        assert record.version_id == "content.0"
        assert record.state == "A"
        assert record.mime_type == "image/png"
        assert record.control_group == "M"
        assert record.size == 1234
        assert record.versionable is True
        assert record.location == "und:abc+content+content.0"
        assert record.location_type == "INTERNAL_ID"
        assert record.checksum_type == "MD5"
        assert record.checksum == "d41d8cd98f00b204e9800998ecf8427e"

    def test_name_falls_back_to_caller(self):
        profile = DATASTREAM_PROFILE.replace(b' dsID="content"', b"")
        assert DatastreamRecord.from_xml(profile, name="content").name == "content"

    def test_missing_size_is_zero(self):
        profile = DATASTREAM_PROFILE.replace(b"<dsSize>1234</dsSize>", b"")
        assert DatastreamRecord.from_xml(profile).size == 0

    def test_dict_mapping_is_symmetric(self):
        record = DatastreamRecord.from_xml(DATASTREAM_PROFILE)
        assert DatastreamRecord.from_dict(record.to_dict()) == record
        assert record.to_dict()["MIMEType"] == "image/png"


class TestLists:
    """Datastream list and search page parsing."""

    def test_datastream_list(self):
        assert parse_datastream_list(DATASTREAM_LIST) == ["DC", "RELS-EXT", "content"]

    def test_search_page_with_token(self):
        page = SearchPage.from_xml(SEARCH_PAGE)
        assert page.pids == ["und:1", "und:2"]
        assert page.token == "abc123token"

    def test_last_search_page(self):
        page = SearchPage.from_xml(LAST_SEARCH_PAGE)
        assert page.pids == ["und:3"]
        assert page.token is None
