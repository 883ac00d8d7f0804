import dxfcodec


def main() -> None:
    sink = dxfcodec.DiagnosticSink()
    drawing = dxfcodec.read("examples/data/dimensions_r2010.dxf", sink=sink)

    dims = list(drawing.query("DIMENSION"))
    print(f"DIMENSION count: {len(dims)}")
    for dim in dims:
        print(dim.handle, dim.kind_name, dim.text or "<>", dim.to_points())

    result = dxfcodec.write(drawing, "/tmp/dimensions_r12.dxf", version="R12", sink=sink)
    print(f"written: {result.written_records}, warnings: {len(sink.warnings)}")


if __name__ == "__main__":
    main()
