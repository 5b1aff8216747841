import pytest

SAMPLE = """\
import java.util.*;

public class Foo {
    static void bar() {
        for (int x = 0; x < 3; x++) {
            System.out.println(x);
        }

        StringBuilder poem = new StringBuilder();
        for (String s : List.of("fee", "fi", "fo", "fum")) {
            if (poem.length() > 0) {
                poem.append(" ");
            }
            poem.append(s);
        }
        System.out.println(poem);

        for (int x = 10, y = 1; x > 0 && y < 100; x--, y *= 2)
            for (int z = x; z < y; z++)
                System.out.println(z);

        System.out.println("forever");
        int n = 0;
        for (;;) {
            if (n == 3)
                break;
            System.out.println("and ever");
            n++;
        }
    }

    public static void main(String[] args) {
        bar();
    }
}
"""


@pytest.fixture
def sample_source():
    return SAMPLE


def program(body):
    """Embrulha instruções num main() para o interpretador."""
    return "public class Main {\n    public static void main(String[] args) {\n" + body + "\n    }\n}\n"


@pytest.fixture
def make_program():
    return program
