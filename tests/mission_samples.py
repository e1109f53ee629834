"""Synthetic mission archives shared by the test suite."""

from __future__ import annotations

import zipfile
from pathlib import Path

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16

# One blue plane group, one client unit, two route points.
MINIMAL_MISSION = r'''mission =
{
    ["coalition"] =
    {
        ["blue"] =
        {
            ["country"] =
            {
                [1] =
                {
                    ["id"] = 2,
                    ["name"] = "USA",
                    ["plane"] =
                    {
                        ["group"] =
                        {
                            [1] =
                            {
                                ["name"] = "Enfield",
                                ["task"] = "CAP",
                                ["units"] =
                                {
                                    [1] =
                                    {
                                        ["name"] = "Aerial-1-1",
                                        ["type"] = "F-16C_50",
                                        ["skill"] = "Client",
                                        ["unitId"] = 1,
                                        ["x"] = -291014,
                                        ["y"] = 617414,
                                        ["alt"] = 2000,
                                        ["speed"] = 220.97,
                                        ["heading"] = 1.5707963267949,
                                    }, -- end of [1]
                                }, -- end of ["units"]
                                ["route"] =
                                {
                                    ["points"] =
                                    {
                                        [1] =
                                        {
                                            ["x"] = -291014,
                                            ["y"] = 617414,
                                            ["alt"] = 2000,
                                            ["type"] = "Turning Point",
                                            ["action"] = "Turning Point",
                                            ["speed"] = 220.97,
                                        }, -- end of [1]
                                        [2] =
                                        {
                                            ["name"] = "Push",
                                            ["x"] = -250000,
                                            ["y"] = 650000,
                                            ["alt"] = 6000,
                                            ["type"] = "Turning Point",
                                            ["action"] = "Turning Point",
                                            ["speed"] = 250,
                                        }, -- end of [2]
                                    }, -- end of ["points"]
                                }, -- end of ["route"]
                            }, -- end of [1]
                        }, -- end of ["group"]
                    }, -- end of ["plane"]
                }, -- end of [1]
            }, -- end of ["country"]
        }, -- end of ["blue"]
    }, -- end of ["coalition"]
    ["theatre"] = "Caucasus",
} -- end of mission
'''

FULL_MISSION = r'''mission =
{
    ["requiredModules"] =
    {
        ["F-16C_50"] = "F-16C_50",
        ["Su-27"] = "Su-27",
    }, -- end of ["requiredModules"]
    ["result"] =
    {
        ["date"] =
        {
            ["Day"] = 1,
            ["Year"] = 1999,
            ["Month"] = 1,
        }, -- end of ["date"]
        ["start_time"] = 5,
    }, -- end of ["result"]
    ["date"] =
    {
        ["Day"] = 7,
        ["Year"] = 2011,
        ["Month"] = 6,
    }, -- end of ["date"]
    ["coalition"] =
    {
        ["blue"] =
        {
            ["bullseye"] =
            {
                ["y"] = 617414,
                ["x"] = -291014,
            }, -- end of ["bullseye"]
            ["country"] =
            {
                [1] =
                {
                    ["id"] = 2,
                    ["plane"] =
                    {
                        ["group"] =
                        {
                            [1] =
                            {
                                ["task"] = "CAP",
                                ["route"] =
                                {
                                    ["points"] =
                                    {
                                        [2] =
                                        {
                                            ["name"] = "Push",
                                            ["alt"] = 6000,
                                            ["action"] = "Turning Point",
                                            ["speed"] = 250,
                                            ["type"] = "Turning Point",
                                            ["y"] = 650000,
                                            ["x"] = -250000,
                                        }, -- end of [2]
                                        [1] =
                                        {
                                            ["alt"] = 2000,
                                            ["action"] = "From Parking Area",
                                            ["speed"] = 138.88888888889,
                                            ["task"] =
                                            {
                                                ["id"] = "ComboTask",
                                                ["params"] =
                                                {
                                                    ["tasks"] =
                                                    {
                                                        [1] =
                                                        {
                                                            ["number"] = 1,
                                                            ["id"] = "EngageTargets",
                                                        }, -- end of [1]
                                                    }, -- end of ["tasks"]
                                                }, -- end of ["params"]
                                            }, -- end of ["task"]
                                            ["type"] = "TakeOffParking",
                                            ["y"] = 617414,
                                            ["x"] = -291014,
                                        }, -- end of [1]
                                    }, -- end of ["points"]
                                }, -- end of ["route"]
                                ["groupId"] = 1,
                                ["units"] =
                                {
                                    [1] =
                                    {
                                        ["alt"] = 2000,
                                        ["skill"] = "Client",
                                        ["callsign"] =
                                        {
                                            [1] = 1,
                                            [2] = 1,
                                            [3] = 1,
                                            ["name"] = "Enfield11",
                                        }, -- end of ["callsign"]
                                        ["type"] = "F-16C_50",
                                        ["unitId"] = 1,
                                        ["y"] = 617414,
                                        ["x"] = -291014,
                                        ["name"] = "Aerial-1-1",
                                        ["heading"] = 1.5707963267949,
                                        ["speed"] = 1.3888888888889e2,
                                    }, -- end of [1]
                                    [2] =
                                    {
                                        ["alt"] = 2000,
                                        ["type"] = "F-16C_50",
                                        ["unitId"] = 2,
                                        ["y"] = 617450,
                                        ["x"] = -291050,
                                        ["name"] = "Aerial-1-2",
                                        ["heading"] = 1.5707963267949,
                                        ["speed"] = 138.88888888889,
                                    }, -- end of [2]
                                }, -- end of ["units"]
                                ["name"] = "Enfield",
                            }, -- end of [1]
                        }, -- end of ["group"]
                    }, -- end of ["plane"]
                    ["name"] = "USA",
                }, -- end of [1]
            }, -- end of ["country"]
            ["name"] = "blue",
        }, -- end of ["blue"]
        ["red"] =
        {
            ["country"] =
            {
                [1] =
                {
                    ["id"] = 0,
                    ["name"] = "Russia",
                    ["vehicle"] =
                    {
                        ["group"] =
                        {
                            [1] =
                            {
                                ["name"] = "SAM Site",
                                ["task"] = "Ground Nothing",
                                ["units"] =
                                {
                                    [1] =
                                    {
                                        ["name"] = "SAM-1",
                                        ["type"] = "SA-11 Buk LN 9A310M1",
                                        ["skill"] = "Average",
                                        ["unitId"] = 3,
                                        ["x"] = -300000,
                                        ["y"] = 620000,
                                        ["heading"] = 0,
                                        ["playerCanDrive"] = true,
                                    }, -- end of [1]
                                    [2] =
                                    {
                                        ["name"] = "No type",
                                        ["skill"] = "Average",
                                        ["unitId"] = 4,
                                    }, -- end of [2]
                                }, -- end of ["units"]
                                ["route"] =
                                {
                                    ["points"] =
                                    {
                                        [1] =
                                        {
                                            ["x"] = -300000,
                                            ["y"] = 620000,
                                            ["alt"] = 30,
                                            ["type"] = "Turning Point",
                                            ["action"] = "Off Road",
                                            ["speed"] = 0,
                                        }, -- end of [1]
                                    }, -- end of ["points"]
                                }, -- end of ["route"]
                            }, -- end of [1]
                            [2] =
                            {
                                ["name"] = "Empty convoy",
                                ["task"] = "Ground Nothing",
                                ["units"] =
                                {
                                }, -- end of ["units"]
                            }, -- end of [2]
                        }, -- end of ["group"]
                    }, -- end of ["vehicle"]
                }, -- end of [1]
            }, -- end of ["country"]
        }, -- end of ["red"]
    }, -- end of ["coalition"]
    ["sortie"] = "DictKey_sortie_5",
    ["descriptionText"] = "DictKey_descriptionText_1",
    ["descriptionBlueTask"] = "DictKey_descriptionBlueTask_3",
    ["descriptionRedTask"] = "DictKey_descriptionRedTask_2",
    ["descriptionNeutralsTask"] = "DictKey_descriptionNeutralsTask_4",
    ["weather"] =
    {
        ["qnh"] = 754,
        ["season"] =
        {
            ["temperature"] = -2.5,
        }, -- end of ["season"]
        ["wind"] =
        {
            ["at8000"] =
            {
                ["speed"] = 12,
                ["dir"] = 270,
            }, -- end of ["at8000"]
            ["atGround"] =
            {
                ["speed"] = 3,
                ["dir"] = 90,
            }, -- end of ["atGround"]
            ["at2000"] =
            {
                ["speed"] = 8,
                ["dir"] = 180,
            }, -- end of ["at2000"]
        }, -- end of ["wind"]
    }, -- end of ["weather"]
    ["theatre"] = "Syria",
    ["start_time"] = 28815,
} -- end of mission
'''

FULL_DICTIONARY = r'''dictionary =
{
    ["DictKey_descriptionText_1"] = "Intercept the \"Backfire\" raid.\
Expect escorts.",
    ["DictKey_sortie_5"] = "Operation Test",
    ["DictKey_descriptionBlueTask_3"] = "Defend the coast",
    ["DictKey_descriptionRedTask_2"] = "Strike the port",
    ["DictKey_descriptionNeutralsTask_4"] = "",
} -- end of dictionary
'''


def write_miz(
    path: Path,
    mission: str | None = MINIMAL_MISSION,
    dictionary: str | None = None,
    extra: dict[str, bytes] | None = None,
) -> Path:
    """Write a ``.miz`` archive; ``None`` leaves the entry out."""
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        if mission is not None:
            zf.writestr("mission", mission)
        if dictionary is not None:
            zf.writestr("l10n/DEFAULT/dictionary", dictionary)
        for name, data in (extra or {}).items():
            zf.writestr(name, data)
    return path


def mark_deflate64(path: Path, name: str) -> Path:
    """Relabel ``name``'s compression method as deflate64, which zipfile cannot read."""
    data = bytearray(path.read_bytes())
    encoded = name.encode()
    # (signature, method offset, name offset) for local and central headers
    for signature, method_at, name_at in ((b"PK\x03\x04", 8, 30), (b"PK\x01\x02", 10, 46)):
        pos = data.find(signature)
        while pos != -1:
            if data[pos + name_at : pos + name_at + len(encoded)] == encoded:
                data[pos + method_at : pos + method_at + 2] = (9).to_bytes(2, "little")
            pos = data.find(signature, pos + 1)
    path.write_bytes(bytes(data))
    return path
