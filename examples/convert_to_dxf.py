import dxfcodec


result = dxfcodec.to_dxf(
    "examples/data/faces_r2000.dxf",
    "/tmp/faces_r2000_out.dxf",
    types="3DFACE LINE",
    dxf_version="R2010",
)
print(result)
